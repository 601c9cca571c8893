import os
from dotenv import load_dotenv

# .env 파일을 불러와서 환경변수 등록
load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# 콤마로 구분 (예: "http://localhost:3000,https://admin.example.com")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Supabase 테이블 이름
ATTENDANCE_TABLE = os.getenv("ATTENDANCE_TABLE", "attendance")
CONTRACTS_TABLE = os.getenv("CONTRACTS_TABLE", "contracts")
