import enum


class Collection(str, enum.Enum):
    USERS = "users"
    TREATMENTS = "treatments"
    APPOINTMENTS = "appointments"


class UserRole(str, enum.Enum):
    USER = "user"
    PROFESSIONAL = "professional"


class SessionState(str, enum.Enum):
    OPEN = "sessionStarted"
    CLOSED = "closedSession"


class AppointmentState(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

DOCUMENT_ID_PATTERN = r"^[a-zA-Z0-9]{20,}$"
PHONE_PATTERN = r"^\+?[\d\s\-()]+$"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
MIN_PASSWORD_LENGTH = 6
MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 500


class Messages:
    # Authentication
    INVALID_CREDENTIALS = "Invalid email or password"
    TOKEN_REQUIRED = "Authentication token required"
    TOKEN_INVALID = "Invalid or expired token"
    FORBIDDEN = "Access denied"

    # Users
    USER_NOT_FOUND = "User not found"
    USER_ALREADY_EXISTS = "Email already registered"
    CANNOT_DELETE_PROFESSIONAL = "Professional users cannot be deleted"
    INVALID_ROLE = "Role must be 'user' or 'professional'"

    # Appointments
    APPOINTMENT_NOT_FOUND = "Appointment not found"
    APPOINTMENT_CONFLICT = "An appointment already exists in that time range"
    INVALID_TIME_RANGE = "End time must be after start time"
    INVALID_DATE = "Invalid appointment date"
    APPOINTMENT_IN_PAST = "Appointments cannot be created in the past"

    # Treatments
    TREATMENT_NOT_FOUND = "Treatment not found"
    TREATMENT_ALREADY_EXISTS = "A treatment with that name already exists"

    # General
    INVALID_DATA = "Invalid data"
    INVALID_ID = "Invalid document ID"
    SERVER_ERROR = "Internal server error"

    # Success
    LOGIN_SUCCESS = "Login successful"
    LOGOUT_SUCCESS = "Logged out successfully"
    REGISTER_SUCCESS = "User registered successfully"
    TOKEN_VALID = "Token is valid"
    USER_DELETED = "User deleted successfully"
    APPOINTMENT_CREATED = "Appointment created successfully"
    APPOINTMENT_UPDATED = "Appointment updated successfully"
    APPOINTMENT_DELETED = "Appointment deleted successfully"
    TREATMENT_CREATED = "Treatment created successfully"
    TREATMENT_UPDATED = "Treatment updated successfully"
    TREATMENT_DELETED = "Treatment deleted successfully"
