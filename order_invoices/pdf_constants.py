"""Page geometry, colors and font sizes for the PDF invoice (points, top-left origin)."""

PAGE_FORMAT = "A4"

X_LEFT = 50
X_RIGHT = 545
CONTENT_W = X_RIGHT - X_LEFT

# Header: company block left, title block right (text y values are baselines)
COMPANY_NAME_Y = 70.0
COMPANY_LINE_Y = 96.0
TITLE_Y = 76.0
META_Y = 100.0
HEADER_LINE_H = 15.0

HEADER_RULE_Y = 150.0

# Bill To / Payment Info blocks
INFO_LABEL_Y = 172.0
INFO_FIRST_Y = 192.0
INFO_LINE_H = 15.0
BILL_TO_X = 50
PAYMENT_X = 350

# Item table
TABLE_HEADER_Y_FIRST = 280.0
TABLE_HEADER_Y_CONT = 50.0
TABLE_HEADER_H = 25.0
ROW_H = 25.0
ROW_TEXT_OFFSET = 16.0

COL_ITEM_X = 60
COL_ITEM_W = 280
COL_QTY_CENTER = 375
COL_PRICE_RIGHT = 470
COL_TOTAL_RIGHT = 540

# Pagination capacities, in item rows
FIRST_PAGE_CAPACITY = 17
CONT_PAGE_CAPACITY = 27
# Rows the totals block needs beneath the last item row
TOTALS_RESERVE_ROWS = 6

# Totals block
TOTALS_GAP = 20.0
TOTALS_TOP_CONT = 70.0
TOTALS_LABEL_X = 380
TOTALS_ROW_H = 20.0
GRAND_BAR_X = 370
GRAND_BAR_W = 175
GRAND_BAR_H = 30.0
GRAND_BAR_GAP = 5.0

# Notes block
NOTES_GAP = 40.0
NOTES_W = 400
NOTES_LINE_H = 14.0
NOTES_TOP_CONT = 60.0

# Footer (every page)
FOOTER_RULE_Y = 770.0
FOOTER_TEXT_Y = 788.0
FOOTER_LINE_H = 14.0

# Colors (RGB)
COLOR_PRIMARY = (37, 99, 235)       # #2563EB
COLOR_TEXT = (31, 41, 55)           # #1F2937
COLOR_GRAY = (107, 114, 128)        # #6B7280
COLOR_ROW_SHADE = (249, 250, 251)   # #F9FAFB
COLOR_DISCOUNT = (5, 150, 105)      # #059669
COLOR_FOOTER_RULE = (229, 231, 235) # #E5E7EB
COLOR_WHITE = (255, 255, 255)

FONT_SIZE_COMPANY = 24
FONT_SIZE_TITLE = 28
FONT_SIZE_LABEL = 12
FONT_SIZE_NAME = 11
FONT_SIZE_NORMAL = 10
FONT_SIZE_SMALL = 9
FONT_SIZE_GRAND = 14
