"""Profile and account settings screen."""

import logging
import re
from dataclasses import dataclass, field

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.health import BmiResult
from nutriai.domain.screens import SettingsTab
from nutriai.errors import ApiError
from nutriai.services.metrics import calculate_bmi
from nutriai.services.notifications import Notifier, error, success
from nutriai.services.scoring import password_strength
from nutriai.services.storage import (
    LANGUAGE_KEY,
    NOTIFY_PREFS_KEY,
    SESSION_TIMEOUT_KEY,
    TIME_ZONE_KEY,
    KeyValueStore,
    load_json,
    save_json,
)

_logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
PHONE_PATTERN = re.compile(r"^[\d\s\-+()]{7,}$")
MIN_PASSWORD_SCORE = 3
DEFAULT_SESSION_TIMEOUT_MINUTES = 30

PROFILE_KEYS = (
    "name",
    "age",
    "gender",
    "height",
    "weight",
    "activity_level",
    "health_goal",
    "dietary_preferences",
    "allergies",
    "medical_conditions",
)
ACCOUNT_KEYS = ("username", "email", "phone", "dob", "bio", "profile_visibility")


def default_notification_prefs() -> dict[str, bool]:
    return {"email": True, "sms": False, "push": True}


def _blank_profile() -> dict[str, str]:
    profile = dict.fromkeys(PROFILE_KEYS + ACCOUNT_KEYS, "")
    profile["profile_visibility"] = "friends"
    return profile


@dataclass
class SettingsController:
    api: ApiClient
    notifier: Notifier
    store: KeyValueStore
    tab: SettingsTab = SettingsTab.SETTINGS
    profile: dict[str, str] = field(default_factory=_blank_profile)
    user: dict[str, object] | None = None
    two_factor_enabled: bool = False
    notification_prefs: dict[str, bool] = field(
        default_factory=default_notification_prefs
    )
    language: str = "en"
    time_zone: str = "UTC"
    session_timeout_minutes: int = DEFAULT_SESSION_TIMEOUT_MINUTES

    def __post_init__(self) -> None:
        prefs = load_json(self.store, NOTIFY_PREFS_KEY)
        if isinstance(prefs, dict):
            self.notification_prefs.update(
                {key: bool(value) for key, value in prefs.items()}
            )
        self.language = self.store.get(LANGUAGE_KEY) or self.language
        self.time_zone = self.store.get(TIME_ZONE_KEY) or self.time_zone
        timeout = self.store.get(SESSION_TIMEOUT_KEY)
        if timeout and timeout.isdigit():
            self.session_timeout_minutes = int(timeout)

    async def load_profile(self) -> dict[str, str]:
        try:
            body = await self.api.get("/api/users/profile")
        except ApiError:
            _logger.warning("Loading profile failed", exc_info=True)
            error(self.notifier, "Failed to load profile")
            return self.profile
        user = body.get("user")
        if not isinstance(user, dict):
            return self.profile
        self.user = user
        for key in PROFILE_KEYS:
            self.profile[key] = str(user.get(key) or "")
        for key in ACCOUNT_KEYS:
            if user.get(key):
                self.profile[key] = str(user[key])
        if "twofa_enabled" in user:
            self.two_factor_enabled = bool(user["twofa_enabled"])
        return self.profile

    async def update_profile(self) -> bool:
        payload = {key: self.profile[key] for key in PROFILE_KEYS}
        try:
            body = await self.api.put("/api/users/profile", payload)
        except ApiError as exc:
            _logger.warning("Updating profile failed", exc_info=True)
            error(self.notifier, exc.user_message("Failed to update profile"))
            return False
        user = body.get("user")
        if isinstance(user, dict):
            self.user = user
        success(self.notifier, "Profile updated")
        return True

    def bmi(self) -> BmiResult | None:
        return calculate_bmi(self.profile.get("height"), self.profile.get("weight"))

    async def request_email_verification(self) -> bool:
        email = self.profile.get("email") or ""
        if not EMAIL_PATTERN.match(email):
            error(self.notifier, "Enter a valid email")
            return False
        try:
            await self.api.post("/api/auth/request-email-change", {"email": email})
        except ApiError:
            _logger.warning("Email verification request failed", exc_info=True)
            error(self.notifier, "Could not send email verification")
            return False
        success(self.notifier, "Verification email sent")
        return True

    async def request_phone_otp(self) -> bool:
        phone = self.profile.get("phone") or ""
        if not PHONE_PATTERN.match(phone):
            error(self.notifier, "Enter a valid phone")
            return False
        try:
            await self.api.post("/api/users/request-phone-otp", {"phone": phone})
        except ApiError:
            _logger.warning("Phone OTP request failed", exc_info=True)
            error(self.notifier, "Could not send phone OTP")
            return False
        success(self.notifier, "OTP sent to phone")
        return True

    async def change_password(self, current: str, new: str, confirm: str) -> bool:
        """Validate locally, then ask the backend to change the password."""
        if new != confirm:
            error(self.notifier, "Passwords do not match")
            return False
        if password_strength(new) < MIN_PASSWORD_SCORE:
            error(self.notifier, "Password too weak")
            return False
        try:
            await self.api.post(
                "/api/auth/change-password",
                {"currentPassword": current, "newPassword": new},
            )
        except ApiError as exc:
            _logger.warning("Password change failed", exc_info=True)
            error(self.notifier, exc.user_message("Failed to change password"))
            return False
        success(self.notifier, "Password updated")
        return True

    def toggle_notification(self, channel: str) -> None:
        self.notification_prefs[channel] = not self.notification_prefs.get(channel)

    async def save_notifications(self) -> None:
        """Send preferences to the backend; they are always kept locally."""
        try:
            await self.api.post("/api/users/notifications", self.notification_prefs)
        except ApiError:
            _logger.warning("Saving notification preferences failed", exc_info=True)
            success(self.notifier, "Saved locally")
        else:
            success(self.notifier, "Notification preferences saved")
        save_json(self.store, NOTIFY_PREFS_KEY, self.notification_prefs)

    def save_locale(self, language: str, time_zone: str) -> None:
        self.language = language
        self.time_zone = time_zone
        self.store.set(LANGUAGE_KEY, language)
        self.store.set(TIME_ZONE_KEY, time_zone)
        success(self.notifier, "Language and time zone saved")

    def save_session_timeout(self, minutes: int) -> None:
        self.session_timeout_minutes = minutes
        self.store.set(SESSION_TIMEOUT_KEY, str(minutes))
        success(self.notifier, "Session timeout preference saved")
