from datetime import datetime, timedelta, timezone
from typing import Optional, Set
from jose import JWTError, jwt
from passlib.context import CryptContext
from onboarding.core.config import settings
import hashlib
import threading
import uuid

ALGORITHM = "HS256"

# Configure bcrypt - we handle 72-byte limit manually in get_password_hash()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto"
)

# In-memory token blacklist, cleared on restart
_token_blacklist: Set[str] = set()
_blacklist_lock = threading.Lock()


def _truncate_password(password: str) -> str:
    # Bcrypt has a hard limit of 72 bytes
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        return password_bytes[:72].decode('utf-8', errors='ignore')
    return password


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash"""
    return pwd_context.verify(_truncate_password(plain_password), hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt (truncates to 72 bytes as required)"""
    return pwd_context.hash(_truncate_password(password))


def _create_token(data: dict, token_type: str, lifetime: timedelta) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + lifetime
    # Unique per token so blacklisting one never matches another
    to_encode.update({"exp": expire, "type": token_type, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    lifetime = expires_delta or timedelta(seconds=settings.access_token_expires)
    return _create_token(data, "access", lifetime)


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT refresh token"""
    lifetime = expires_delta or timedelta(seconds=settings.refresh_token_expires)
    return _create_token(data, "refresh", lifetime)


def _get_token_hash(token: str) -> str:
    """Generate a hash of the token for blacklist storage"""
    return hashlib.sha256(token.encode()).hexdigest()


def blacklist_token(token: str) -> None:
    """Add token to blacklist"""
    token_hash = _get_token_hash(token)
    with _blacklist_lock:
        _token_blacklist.add(token_hash)


def is_token_blacklisted(token: str) -> bool:
    """Check if token is blacklisted"""
    token_hash = _get_token_hash(token)
    with _blacklist_lock:
        return token_hash in _token_blacklist


def verify_token(token: str, token_type: str = "access") -> Optional[str]:
    """Verify JWT token and return subject (profile id) if valid"""
    try:
        if is_token_blacklisted(token):
            return None

        payload = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
        subject: str = payload.get("sub")
        token_type_payload: str = payload.get("type")

        if subject is None or token_type_payload != token_type:
            return None
        return subject
    except JWTError:
        return None


def create_storage_token(bucket: str, path: str, expires_in: int) -> tuple[str, datetime]:
    """
    Create a signed token granting read access to one stored object.

    Returns:
        Tuple of (token, expiry time)
    """
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    token = jwt.encode(
        {"bucket": bucket, "path": path, "exp": expires_at, "type": "storage"},
        settings.jwt_secret,
        algorithm=ALGORITHM,
    )
    return token, expires_at


def verify_storage_token(token: str, bucket: str, path: str) -> bool:
    """Check that a storage token is unexpired and bound to this bucket and path"""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
    except JWTError:
        return False
    return (
        payload.get("type") == "storage"
        and payload.get("bucket") == bucket
        and payload.get("path") == path
    )
