import pytest
from credcheck.exceptions import AuthError, ValidationError
from credcheck.services.auth_service import AuthService
from credcheck.database import DatabaseManager
from credcheck.models import Candidate
from credcheck.models.candidate import CandidateStatus
from credcheck.utils.security import verify_token


@pytest.fixture
def auth_service():
    """Create auth service instance"""
    return AuthService()


class TestAuthService:
    """Test authentication service"""

    def test_register_employer(self, auth_service):
        """Test employer registration"""
        result = auth_service.register_employer({
            'email': 'owner@company.com',
            'password': 'SecurePass123',
            'name': 'Company Owner',
            'companyName': 'Company Ltd',
            'companySize': '10-50'
        })

        assert result['user']['role'] == 'employer'
        assert result['user']['employer']['company_name'] == 'Company Ltd'
        assert result['user']['employer']['status'] == 'active'

        payload = verify_token(result['token'])
        assert payload['user_id'] == result['user']['id']
        assert payload['role'] == 'employer'

    def test_register_duplicate_email(self, auth_service, employer):
        """Test duplicate email registration"""
        with pytest.raises(ValidationError, match='Email already registered'):
            auth_service.register_employer({
                'email': 'hr@example.com',
                'password': 'SecurePass123',
                'name': 'Someone Else',
                'companyName': 'Other Corp'
            })

    def test_register_missing_company(self, auth_service):
        """Test employer registration without a company name"""
        with pytest.raises(ValidationError, match='companyName'):
            auth_service.register_employer({
                'email': 'owner@company.com',
                'password': 'SecurePass123',
                'name': 'Company Owner'
            })

    def test_weak_password(self, auth_service):
        """Test password rules"""
        with pytest.raises(ValidationError, match='at least 8 characters'):
            auth_service.register_employer({
                'email': 'owner@company.com',
                'password': 'short',
                'name': 'Company Owner',
                'companyName': 'Company Ltd'
            })

    def test_candidate_claims_invitation(self, invited, candidate):
        """Test candidate registration attaches the invited profile"""
        assert candidate['user']['candidateId'] == invited['candidateId']

        profile = DatabaseManager(Candidate).get(invited['candidateId'])
        assert profile.user_id == candidate['user']['id']
        assert profile.status == CandidateStatus.ACTIVE

    def test_invitation_claimed_once(self, auth_service, invited, candidate):
        """Test a second registration cannot take over a claimed invitation"""
        with pytest.raises(ValidationError, match='already claimed'):
            auth_service.register_candidate({
                'email': 'other@example.com',
                'password': 'SecurePass123',
                'name': 'Other Person',
                'candidateId': invited['candidateId']
            })

    def test_candidate_matched_by_email(self, auth_service, invited):
        """Test registration without candidateId finds the invitation by email"""
        result = auth_service.register_candidate({
            'email': 'candidate@example.com',
            'password': 'SecurePass123',
            'name': 'Jane Candidate'
        })
        assert result['user']['candidateId'] == invited['candidateId']

    def test_candidate_without_invitation(self, auth_service):
        """Test self-registration creates a fresh profile"""
        result = auth_service.register_candidate({
            'email': 'walkin@example.com',
            'password': 'SecurePass123',
            'name': 'Walk In'
        })
        assert result['user']['candidate']['status'] == 'active'
        assert result['user']['candidate']['email'] == 'walkin@example.com'

    def test_authenticate_user(self, auth_service, employer):
        """Test user authentication"""
        result = auth_service.authenticate_user('hr@example.com', 'SecurePass123')
        assert result['user']['email'] == 'hr@example.com'
        assert verify_token(result['token'])['email'] == 'hr@example.com'

    def test_invalid_credentials(self, auth_service, employer):
        """Test authentication with invalid credentials"""
        with pytest.raises(AuthError, match='Invalid credentials'):
            auth_service.authenticate_user('hr@example.com', 'WrongPass123')

        with pytest.raises(AuthError):
            auth_service.authenticate_user('nobody@example.com', 'SecurePass123')


class TestTokens:
    """Test token helpers"""

    def test_expired_token(self):
        """Test expired tokens do not decode"""
        from datetime import timedelta
        from credcheck.utils.security import generate_token

        token = generate_token({'user_id': 'u-1', 'role': 'admin'}, expires_delta=timedelta(seconds=-1))
        assert verify_token(token) is None

    def test_bearer_token(self):
        """Test Authorization header parsing"""
        from credcheck.utils.security import bearer_token

        assert bearer_token('Bearer abc.def') == 'abc.def'
        assert bearer_token('Token abc.def') is None
        assert bearer_token('Bearer') is None
        assert bearer_token(None) is None
