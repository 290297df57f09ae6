import math

MASK_DENSITY = 400
TRANSPARENCY_THRESHOLD = 254
MIN_CANVAS_SIZE = 1000
NEIGHBOR_TOLERANCE = 10
RAY_COUNT = 360
TO_RADIANS = math.pi / 180

# layer labels, index 0 is the bottom layer
ACTIVE_LABELS = "❶❷❸❹❺❻❼❽❾❿⓫⓬⓭⓮⓯⓰⓱⓲⓳⓴"
INACTIVE_LABELS = "①②③④⑤⑥⑦⑧⑨⑩⑪⑫⑬⑭⑮⑯⑰⑱⑲⑳"
