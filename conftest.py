import os

# Tests never reach a real database or Redis
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_hotelops.db")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("SECRET_KEY", "x" * 32)
