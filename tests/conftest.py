import os
# Point the app at a throwaway SQLite file before any credcheck imports
os.environ["DATABASE_URL"] = "sqlite:///./test_credcheck.db"
os.environ["LOG_FILE"] = "logs/test_credcheck.log"
# No outbound email in tests
os.environ["SENDGRID_API_KEY"] = ""

import pytest
from credcheck.database import init_db, drop_db, DatabaseManager
from credcheck.main import create_app
from credcheck.models import User
from credcheck.models.user import UserRole
from credcheck.services.auth_service import AuthService
from credcheck.services.verification_service import VerificationService
from credcheck.utils.security import hash_password, generate_user_token

CANDIDATE_EMAIL = 'candidate@example.com'


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test"""
    init_db()
    yield
    drop_db()


@pytest.fixture
def app():
    return create_app('testing')


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a token"""
    def _headers(token):
        return {'Authorization': f'Bearer {token}'}
    return _headers


@pytest.fixture
def employer():
    """Registered employer: {token, user}"""
    return AuthService().register_employer({
        'email': 'hr@example.com',
        'password': 'SecurePass123',
        'name': 'Hiring Manager',
        'companyName': 'Acme Corp',
        'industry': 'Technology'
    })


@pytest.fixture
def admin():
    """Admin user: {token, user_id}"""
    user = DatabaseManager(User).create(
        email='admin@example.com',
        password_hash=hash_password('AdminPass123'),
        role=UserRole.ADMIN,
        name='Admin User'
    )
    return {'token': generate_user_token(user), 'user_id': user.id}


@pytest.fixture
def invited(employer):
    """Standard-package verification for a not yet registered candidate"""
    return VerificationService().create_verification(employer['user']['id'], {
        'candidateName': 'Jane Candidate',
        'candidateEmail': CANDIDATE_EMAIL,
        'position': 'Software Engineer',
        'packageType': 'standard'
    })


@pytest.fixture
def candidate(invited):
    """Candidate who registered through the invitation: {token, user}"""
    return AuthService().register_candidate({
        'email': CANDIDATE_EMAIL,
        'password': 'SecurePass123',
        'name': 'Jane Candidate',
        'candidateId': invited['candidateId']
    })
