"""
Page geometry shared by every template (A4 portrait, PDF points, origin bottom-left).
Templates only pick colors, fonts and alignment; positions stay fixed.
"""

PAGE_W, PAGE_H = 595, 842

# Margins
MARGIN_X = 50
RIGHT_X = PAGE_W - MARGIN_X
TOP_Y = PAGE_H - 56
CONTENT_MIN_Y = 64

# Footer (fixed offset from the page bottom)
FOOTER_Y = 36
FOOTER_RULE_Y = 50
FOOTER_SIZE = 8

# Header
LOGO_BOX_W, LOGO_BOX_H = 120, 60
LOGO_GAP = 10

# Text blocks
BODY_SIZE = 10
LEADING = 14
SECTION_GAP = 18
META_X = PAGE_W - 265

# Table geometry
TABLE_HEADER_HEIGHT = 20
TABLE_ROW_HEIGHT = 18
TABLE_TEXT_SIZE = 10
TABLE_PAD = 6

# Totals block (fixed width, right margin)
TOTALS_BLOCK_W = 200
TOTALS_ROW_HEIGHT = 16

# Payment QR (anchored bottom-right)
QR_SIZE = 96
QR_X = RIGHT_X - QR_SIZE
QR_Y = CONTENT_MIN_Y + 14
QR_TOP = QR_Y + QR_SIZE
QR_CAPTION_Y = CONTENT_MIN_Y + 2
QR_CLEARANCE = 10

# Notes
NOTES_GAP = 16
NOTES_SIZE = 9

# Colors (RGB components in 0-1 space encoded as strings for PDF ops)
COLORS = {
    "text": "0 0 0",
    "muted": "0.45 0.50 0.56",
    "rule": "0.78 0.78 0.78",
    "white": "1 1 1",
    "row_alt": "0.95 0.96 0.97",
}


def color(name: str) -> str:
    return COLORS.get(name, "0 0 0")
