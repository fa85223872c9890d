"""
Flask extensions initialization.
Extensions are initialized here and then initialized with the app in app.py.
"""

from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect

# Initialize Flask-Login
login_manager = LoginManager()

# Initialize CSRF Protection
csrf = CSRFProtect()


@login_manager.request_loader
def load_member_from_request(request):
    """
    Resolve the caller from an ``Authorization: Bearer <token>`` header.

    The token is issued by the identity collaborator; the engine only needs
    the member it maps to.

    Args:
        request: The incoming Flask request

    Returns:
        Member object or None if the header is missing or unknown
    """
    from models.member import get_member_by_token, Member

    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None

    token = auth_header[len('Bearer '):].strip()
    if not token:
        return None

    member_dict = get_member_by_token(token)
    if member_dict:
        return Member(member_dict)
    return None


@login_manager.unauthorized_handler
def unauthorized():
    """Answer unauthenticated API calls with a JSON 401."""
    from utils.api_response import api_error
    from utils.messages import MESSAGES

    return api_error(MESSAGES['unauthenticated'], status=401)
