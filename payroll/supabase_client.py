import logging
from functools import lru_cache

from supabase import Client, create_client

from payroll import config

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """Supabase 클라이언트 생성 (처음 쓸 때 한 번만)"""
    if not config.SUPABASE_URL or not config.SUPABASE_KEY:
        raise RuntimeError("SUPABASE_URL, SUPABASE_KEY 환경변수가 필요합니다")
    logger.info("Supabase 연결: %s", config.SUPABASE_URL)
    return create_client(config.SUPABASE_URL, config.SUPABASE_KEY)
