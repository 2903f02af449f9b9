"""
Clinic Backend API Configuration.

Centralized endpoint layout and wire constants for the clinic REST backend.
Keeping them here ensures the API client, the host app and the tests agree
on the exact paths and on where the auth token travels for each endpoint.

Environment Variables (optional overrides):
    API_BASE_URL - handled by config.Settings
"""

# =============================================================================
# WIRE CONSTANTS
# =============================================================================

# The backend expects this literal in place of an omitted path filter
NO_FILTER_SENTINEL = "null"

# Keys written by the login flow into the process-wide key-value store
TOKEN_STORAGE_KEY = "token"
ROLE_STORAGE_KEY = "userRole"

# =============================================================================
# ENDPOINTS
# =============================================================================

# Format: logical_name -> (method, path template, token placement)
# Token placement is "path", "bearer" or None and must be preserved per endpoint.
ENDPOINTS = {
    "list_doctors": ("GET", "/doctor", None),
    "filter_doctors": ("GET", "/doctor/filter/{name}/{time}/{specialty}", None),
    "save_doctor": ("POST", "/doctor/{token}", "path"),
    "delete_doctor": ("DELETE", "/doctor/{id}/{token}", "path"),
    "patient_profile": ("GET", "/patient/details", "bearer"),
    "patient_appointments": ("GET", "/patient/appointments/{id}/{user}", "bearer"),
    "filter_patient_appointments": ("GET", "/patient/appointments/filter/{condition}/{name}", "bearer"),
    "doctor_appointments": ("GET", "/appointments/{date}/{name}/{token}", "path"),
}

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_endpoint(logical_name: str) -> tuple:
    """Get (method, path_template, token_placement) for an endpoint."""
    if logical_name in ENDPOINTS:
        return ENDPOINTS[logical_name]
    raise ValueError(f"Unknown endpoint: {logical_name}")
