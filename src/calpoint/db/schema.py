"""SQLite schema for profiles and daily logs."""

# Bumped when SCHEMA_SQL changes; stored in PRAGMA user_version
SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- One profile per user, created at onboarding
CREATE TABLE IF NOT EXISTS user_profiles (
    user_id INTEGER PRIMARY KEY AUTOINCREMENT,
    height_cm REAL NOT NULL,
    age INTEGER NOT NULL,
    sex TEXT NOT NULL CHECK(sex IN ('male', 'female')),
    starting_weight REAL NOT NULL,
    goal_weight REAL NOT NULL,
    current_weight REAL NOT NULL,
    tdee INTEGER NOT NULL,
    target_calories INTEGER NOT NULL,
    start_date DATE NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Daily logs, points stored at write time for fast aggregation
CREATE TABLE IF NOT EXISTS daily_logs (
    log_id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    date DATE NOT NULL,
    calories_consumed INTEGER NOT NULL,
    workout_calories INTEGER NOT NULL DEFAULT 0,
    weight REAL,
    notes TEXT,
    diet_points REAL NOT NULL,
    workout_points REAL NOT NULL,
    total_points REAL NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(user_id, date),
    FOREIGN KEY (user_id) REFERENCES user_profiles(user_id)
);

CREATE INDEX IF NOT EXISTS idx_daily_logs_user_date ON daily_logs(user_id, date);
"""


def get_schema_sql() -> str:
    """Return the complete schema SQL."""
    return SCHEMA_SQL
