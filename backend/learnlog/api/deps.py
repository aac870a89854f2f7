from fastapi import Depends
from sqlmodel import Session
from ..core.config import settings
from ..core.security import CurrentUser, get_current_user
from ..db.session import get_session
from ..services.store import LocalStore, RecordStore
from ..services.supabase import SupabaseStore

def get_store(user: CurrentUser = Depends(get_current_user),
              session: Session = Depends(get_session)) -> RecordStore:
    if settings.STORE_BACKEND == "supabase":
        return SupabaseStore(user.token)
    return LocalStore(session)
