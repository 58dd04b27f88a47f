"""
bugsim module: render/colors.py

Central color palette.
"""

BG = (14, 14, 18)
DIR = (30, 40, 40)
TEXT = (235, 235, 235)

FOOD = (40, 170, 60)
VISION = (60, 60, 80)
SELECTED = (250, 220, 90)

PANEL_BG = (24, 24, 30)
ACT_POS = (90, 200, 120)
ACT_NEG = (220, 90, 90)
