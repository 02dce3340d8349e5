"""
User management models and data structures.
"""
from typing import Dict, Optional, Any
from pathlib import Path
import json
import re
import bcrypt


PROFILE_FIELDS = ("display_name", "email")

# User ids double as file names
_USER_ID_PATTERN = re.compile(r"[A-Za-z0-9_.-]{1,64}")


def is_valid_user_id(uid: Optional[str]) -> bool:
    """Check that uid is safe to use as a file name inside the user data directory."""
    if not uid or uid in (".", ".."):
        return False
    return bool(_USER_ID_PATTERN.fullmatch(uid))


class UserData:
    """Per-user JSON record holding profile fields, metadata and credentials."""

    def __init__(self, uid: str, user_data_dir: Path):
        if not is_valid_user_id(uid):
            raise ValueError(f"Invalid user id: {uid!r}")
        self.uid = uid
        self.user_data_dir = user_data_dir
        self._user_file = user_data_dir / f"{uid}.json"

    def exists(self) -> bool:
        """Check whether anything has been stored for this user yet."""
        return self._user_file.exists()

    def load(self) -> Dict[str, Any]:
        """Load full user data structure.

        Shape:
        {
          "profile": {"display_name": str, "email": str},
          "meta": {key: scalar, ...},
          "password_hash": str (optional)
        }
        """
        try:
            data = json.loads(self._user_file.read_text(encoding="utf-8"))
        except (FileNotFoundError, json.JSONDecodeError):
            data = {}

        profile = data.get("profile")
        if not isinstance(profile, dict):
            profile = {}

        meta = data.get("meta")
        if not isinstance(meta, dict):
            meta = {}

        result = {"profile": profile, "meta": meta}

        # Preserve all other fields (like password_hash)
        for key, value in data.items():
            if key not in result:
                result[key] = value

        return result

    def save(self, data: Dict[str, Any]) -> None:
        """Save user data to file."""
        self._user_file.write_text(
            json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8"
        )

    # ----------------------------------------------------------------------
    # Metadata
    # ----------------------------------------------------------------------

    def load_meta(self) -> Dict[str, Any]:
        """Load the metadata map for the user."""
        return self.load()["meta"]

    def get_meta(self, key: str, default: Any = None) -> Any:
        """Get a single metadata value."""
        return self.load_meta().get(key, default)

    def set_meta(self, key: str, value: Any) -> None:
        """Set a metadata value, replacing any previous one."""
        data = self.load()
        data["meta"][key] = value
        self.save(data)

    def delete_meta(self, key: str) -> bool:
        """Remove a metadata value. Returns False if it was not set."""
        data = self.load()
        if key not in data["meta"]:
            return False
        del data["meta"][key]
        self.save(data)
        return True

    def add_meta_once(self, key: str, value: Any) -> bool:
        """Set a metadata value only if the key is absent. Returns True if added."""
        data = self.load()
        if key in data["meta"]:
            return False
        data["meta"][key] = value
        self.save(data)
        return True

    # ----------------------------------------------------------------------
    # Profile
    # ----------------------------------------------------------------------

    def load_profile(self) -> Dict[str, str]:
        """Load profile fields, filling in blanks for missing ones."""
        profile = self.load()["profile"]
        return {name: str(profile.get(name, "")) for name in PROFILE_FIELDS}

    def save_profile(self, fields: Dict[str, str]) -> None:
        """Persist known profile fields, ignoring anything else."""
        data = self.load()
        for name in PROFILE_FIELDS:
            if name in fields:
                data["profile"][name] = fields[name].strip()
        self.save(data)

    # ----------------------------------------------------------------------
    # Credentials
    # ----------------------------------------------------------------------

    def set_password(self, password: str, bcrypt_rounds: int = None) -> None:
        """Store a bcrypt hash of password. bcrypt_rounds is only lowered in tests."""
        data = self.load()
        data["password_hash"] = hash_password(password, bcrypt_rounds)
        self.save(data)

    def check_password(self, password: Optional[str]) -> bool:
        return verify_password(password, self.load().get("password_hash"))

    def has_password(self) -> bool:
        return bool(self.load().get("password_hash"))

    def remove_password(self) -> None:
        data = self.load()
        if data.pop("password_hash", None) is not None:
            self.save(data)


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with a fresh bcrypt salt.

    Raises:
        ValueError: If the password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")
    salt = bcrypt.gensalt(rounds=rounds) if rounds is not None else bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: Optional[str], password_hash: Optional[str]) -> bool:
    """Check a password against a stored hash; malformed hashes never match."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
