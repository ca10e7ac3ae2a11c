"""
Create test user (test@example.com / password123)
Run:  python create_test_user.py   (uses DATABASE_URL from env / .env)
"""
from app.infrastructure.db.session import get_db
from app.application.errors import ConflictError
from app.application.users import RegisterUserUseCase
from app.auth import get_user_by_email

EMAIL = "test@example.com"
PASSWORD = "password123"

db = next(get_db())

try:
    user = RegisterUserUseCase(db).execute(email=EMAIL, password=PASSWORD)
    print("Created user:")
    print(f"  Email: {EMAIL}")
    print(f"  Password: {PASSWORD}")
except ConflictError:
    user = get_user_by_email(db, EMAIL)
    print(f"User already exists: {EMAIL} (ID: {user.id})")

db.close()
