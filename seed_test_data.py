"""
Seed a demo board for test@example.com (run create_test_user.py first).
Run:  python seed_test_data.py
"""
import sys

# ── bootstrap ────────────────────────────────────────────────────
from app.infrastructure.db.session import get_session_factory
from app.application.boards import CreateBoardUseCase, BoardReadService
from app.application.columns import CreateColumnUseCase
from app.application.tasks import CreateTaskUseCase, MoveTaskUseCase
from app.auth import get_user_by_email

db = get_session_factory()()

user = get_user_by_email(db, "test@example.com")
if not user:
    print("User test@example.com not found"); sys.exit(1)
OWNER_ID = user.id

if any(b.name == "Demo" for b in BoardReadService(db).list_boards(OWNER_ID)):
    print("Demo board already exists, nothing to do")
    sys.exit(0)

# ── board + columns ──────────────────────────────────────────────
board = CreateBoardUseCase(db).execute(owner_id=OWNER_ID, name="Demo")
columns = {
    name: CreateColumnUseCase(db).execute(owner_id=OWNER_ID, board_id=board.id, name=name)
    for name in ("Todo", "Doing", "Done")
}

# ── tasks ────────────────────────────────────────────────────────
TASKS = {
    "Todo": ["Write release notes", "Review open PRs", "Plan next sprint"],
    "Doing": ["Fix login redirect", "Migrate CI runners"],
    "Done": ["Upgrade SQLAlchemy"],
}
created = {}
for col_name, titles in TASKS.items():
    for title in titles:
        created[title] = CreateTaskUseCase(db).execute(
            owner_id=OWNER_ID,
            board_id=board.id,
            column_id=columns[col_name].id,
            title=title,
        )

MoveTaskUseCase(db).execute(
    owner_id=OWNER_ID,
    board_id=board.id,
    task_id=created["Fix login redirect"].id,
    column_id=columns["Done"].id,
)

print(f"Seeded board {board.id}:")
for t in BoardReadService(db).list_board_tasks(OWNER_ID, board.id):
    col = next(name for name, c in columns.items() if c.id == t.column_id)
    print(f"  [{col:5}] #{t.position} {t.title}")

db.close()
