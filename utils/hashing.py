from passlib.context import CryptContext

bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')

# bcrypt only looks at the first 72 bytes; newer bcrypt builds raise instead of truncating
BCRYPT_MAX_BYTES = 72


def _truncate(password: str) -> str:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")


def get_password_hash(password: str) -> str:
    return bcrypt_context.hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time check of a plaintext password against a stored bcrypt hash."""
    return bcrypt_context.verify(_truncate(plain_password), hashed_password)


def dummy_verify_password() -> None:
    """Spend the time of a real verify when there is no stored hash to check against."""
    bcrypt_context.dummy_verify()
