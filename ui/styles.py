"""
Styling constants and theme configuration for the viewer UI.
"""

# =============================================================================
# Color Palette
# =============================================================================

# Dark theme colors
BG_COLOR = "#111111"          # Main background
BG_COLOR_LIGHT = "#181818"    # Lighter background (axes, panels)
TEXT_COLOR = "#EEEEEE"        # Main text
TEXT_COLOR_DIM = "#CCCCCC"    # Dimmed text (axis labels, etc.)
TEXT_COLOR_DARK = "#888888"   # Dark text (hints)
BORDER_COLOR = "#555555"      # Borders
GRID_COLOR = "#333333"        # Grid lines

# Accent colors
ACCENT_BLUE = "#6FA8FF"       # Primary accent (data line, buttons)
ACCENT_RED = "#FF6B6B"        # Gaps, validation errors
ACCENT_YELLOW = "#FFD93D"     # Hovered point

# =============================================================================
# PyQt5 Stylesheet
# =============================================================================

DARK_STYLESHEET = f"""
    QMainWindow {{
        background-color: {BG_COLOR};
        color: {TEXT_COLOR};
    }}
    QGroupBox {{
        border: 1px solid {BORDER_COLOR};
        border-radius: 4px;
        margin-top: 8px;
        padding-top: 10px;
        font-weight: bold;
        color: {TEXT_COLOR};
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 8px;
        padding: 0 4px 0 4px;
    }}
    QLabel {{
        color: {TEXT_COLOR};
        font-size: 10pt;
    }}
    QLabel[role="error"] {{
        color: {ACCENT_RED};
        font-size: 9pt;
    }}
    QRadioButton, QComboBox {{
        color: {TEXT_COLOR};
    }}
    QLineEdit {{
        background-color: {BG_COLOR_LIGHT};
        color: {TEXT_COLOR};
        border: 1px solid {BORDER_COLOR};
        border-radius: 4px;
        padding: 4px;
    }}
    QLineEdit[invalid="true"] {{
        border: 1px solid {ACCENT_RED};
    }}
    QPushButton {{
        background-color: {ACCENT_BLUE};
        color: #FFFFFF;
        border: none;
        border-radius: 4px;
        padding: 6px 12px;
        font-weight: bold;
    }}
    QPushButton:hover {{
        background-color: #5A98EF;
    }}
    QPushButton:pressed {{
        background-color: #4A88DF;
    }}
    QPushButton:disabled {{
        background-color: {BORDER_COLOR};
        color: {TEXT_COLOR_DARK};
    }}
    QMenuBar {{
        background-color: {BG_COLOR};
        color: {TEXT_COLOR};
        border-bottom: 1px solid {BORDER_COLOR};
    }}
    QMenuBar::item:selected {{
        background-color: {BG_COLOR_LIGHT};
    }}
"""
