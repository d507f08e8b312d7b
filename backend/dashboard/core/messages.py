"""User-facing strings returned in form state. Kept in one place so tests and handlers agree."""

# Invoice fields
CUSTOMER_REQUIRED = "Please select a customer."
AMOUNT_POSITIVE = "Please enter an amount greater than $0."
STATUS_REQUIRED = "Please select an invoice status."

# Invoice actions
CREATE_INVALID = "Missing Fields. Failed to create Invoice."
UPDATE_INVALID = "Missing Fields. Failed to update Invoice."
CREATE_DB_ERROR = "Database Error: Failed to Create Invoice."
UPDATE_DB_ERROR = "Database Error: Failed to Update Invoice."
UPDATE_NOT_FOUND = "Invoice not found. Failed to Update Invoice."
DELETE_DB_ERROR = "Database Error: Failed to Delete Invoice."

# Registration
NAME_REQUIRED = "Name is required"
EMAIL_INVALID = "Please enter a valid email address."
PASSWORD_TOO_SHORT = "Password must be at least 6 characters."
REGISTER_INVALID = "Missing Fields. Failed to Register."
REGISTER_DUPLICATE = "User with this email already exists."
REGISTER_DB_ERROR = "Database Error: Failed to register."

# Authentication
INVALID_CREDENTIALS = "Invalid credentials."
AUTH_GENERIC = "Something went wrong."
