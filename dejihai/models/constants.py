"""Constants for dejihai.

This module centralizes default values shared by the API, the board
controller and the seeding scripts. Grid geometry lives in
``dejihai.engine.timegrid``.
"""


# Special status markers
HOLIDAY_MARKER = "㊏"

# Resize gesture: one grid slot is this many display units wide
PIXELS_PER_SLOT = 100

# Notices shown after a gesture
NOTICE_SCHEDULE_UPDATED = "スケジュールを更新しました"
NOTICE_SCHEDULE_UPDATE_FAILED = "スケジュールの更新に失敗しました"
NOTICE_DURATION_UPDATED = "作業時間を更新しました"
NOTICE_DURATION_UPDATE_FAILED = "作業時間の更新に失敗しました"
NOTICE_SPECIAL_STATUS_FAILED = "特記事項の更新に失敗しました"
NOTICE_LOAD_FAILED = "タスクの読み込みに失敗しました"

# Seeded storage platforms: (code, name, display_order)
DEFAULT_LOCATIONS = [
    ("1A1", "1A1 定盤", 1),
    ("1A2", "1A2 定盤", 2),
    ("1A3", "1A3 定盤", 3),
    ("2A1", "2A1 定盤", 4),
    ("2A2", "2A2 定盤", 5),
    ("2A3", "2A3 定盤", 6),
    ("先付", "先付", 7),
    ("依頼工事", "依頼工事", 8),
    ("連絡事項", "連絡事項", 9),
]
