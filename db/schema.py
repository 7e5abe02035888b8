# SQL schema for the versecoach database

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Memory cards, one per (user, verse)
CREATE TABLE IF NOT EXISTS memory_cards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    verse_reference TEXT NOT NULL,
    book TEXT NOT NULL,
    chapter INTEGER NOT NULL,
    verse INTEGER NOT NULL,
    verse_text TEXT NOT NULL,
    notes TEXT,
    mastery_level INTEGER NOT NULL DEFAULT 0 CHECK(mastery_level BETWEEN 0 AND 5),
    review_count INTEGER NOT NULL DEFAULT 0 CHECK(review_count >= 0),
    last_reviewed_at TEXT,
    next_review_date TEXT NOT NULL DEFAULT (date('now')),
    review_interval_days INTEGER NOT NULL DEFAULT 1 CHECK(review_interval_days >= 1),
    added_at TEXT NOT NULL DEFAULT (datetime('now')),
    UNIQUE (user_id, verse_reference)
);

-- Review log
CREATE TABLE IF NOT EXISTS memory_reviews (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    card_id INTEGER NOT NULL,
    user_id TEXT NOT NULL,
    outcome TEXT NOT NULL CHECK(outcome IN ('success', 'failure')),
    mastery_before INTEGER NOT NULL,
    mastery_after INTEGER NOT NULL,
    interval_days INTEGER NOT NULL,
    reviewed_at TEXT NOT NULL,
    FOREIGN KEY (card_id) REFERENCES memory_cards (id) ON DELETE CASCADE
);
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_memory_cards_due ON memory_cards (user_id, next_review_date, verse_reference);
CREATE INDEX IF NOT EXISTS idx_memory_cards_added ON memory_cards (user_id, added_at);
CREATE INDEX IF NOT EXISTS idx_memory_reviews_card ON memory_reviews (card_id, reviewed_at);
"""
