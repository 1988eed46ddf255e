import pytest
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError
from credcheck.exceptions import AuthError, NotFoundError, StateError, StoreError, ValidationError
from credcheck.integrations.sendgrid_client import SendGridClient
from credcheck.database import DatabaseManager
from credcheck.models import Candidate, Credential, Verification, VerificationItem
from credcheck.services.admin_service import AdminService
from credcheck.services.auth_service import AuthService
from credcheck.services.verification_service import VerificationService
from credcheck.services.review_service import ReviewService


@pytest.fixture
def verification_service():
    return VerificationService()


def employer_user(employer):
    return {'user_id': employer['user']['id'], 'role': 'employer'}


def candidate_user(candidate):
    return {'user_id': candidate['user']['id'], 'role': 'candidate'}


class TestCreateVerification:
    """Test verification requests"""

    @pytest.mark.parametrize('package_type,expected', [
        ('basic', ['identity', 'education', 'employment']),
        ('standard', ['identity', 'education', 'employment', 'criminal', 'reference']),
        ('comprehensive', ['identity', 'education', 'employment', 'criminal', 'reference'])
    ])
    def test_items_seeded_by_package(self, verification_service, employer, package_type, expected):
        """Test item set per package tier"""
        result = verification_service.create_verification(employer['user']['id'], {
            'candidateName': 'Tier Test',
            'candidateEmail': f'{package_type}@example.com',
            'packageType': package_type
        })
        assert result['items'] == expected

        verification = verification_service.get_verification(result['id'], employer_user(employer))
        assert sorted(item['type'] for item in verification['items']) == sorted(expected)
        assert all(item['status'] == 'pending' for item in verification['items'])
        assert verification['status'] == 'invited'

    def test_price_by_package(self, verification_service, employer):
        """Test package pricing, with unknown tiers at the default"""
        basic = verification_service.create_verification(employer['user']['id'], {
            'candidateName': 'A', 'candidateEmail': 'a@example.com', 'packageType': 'basic'
        })
        custom = verification_service.create_verification(employer['user']['id'], {
            'candidateName': 'B', 'candidateEmail': 'b@example.com', 'packageType': 'executive'
        })
        assert basic['price'] == 29
        assert custom['price'] == 49
        assert custom['items'] == ['identity', 'education', 'employment']

    def test_existing_candidate_reused(self, verification_service, employer, invited):
        """Test a second request for the same email reuses the candidate"""
        result = verification_service.create_verification(employer['user']['id'], {
            'candidateName': 'Jane Candidate',
            'candidateEmail': 'candidate@example.com',
            'packageType': 'basic'
        })
        assert result['candidateId'] == invited['candidateId']

    def test_missing_fields(self, verification_service, employer):
        """Test required request fields"""
        with pytest.raises(ValidationError, match='candidateEmail'):
            verification_service.create_verification(employer['user']['id'], {
                'candidateName': 'No Email', 'packageType': 'basic'
            })

    def test_non_string_fields(self, verification_service, employer):
        """Test email and package must be strings"""
        with pytest.raises(ValidationError, match='Invalid email format'):
            verification_service.create_verification(employer['user']['id'], {
                'candidateName': 'Typed', 'candidateEmail': 123, 'packageType': 'basic'
            })
        with pytest.raises(ValidationError, match='packageType'):
            verification_service.create_verification(employer['user']['id'], {
                'candidateName': 'Typed', 'candidateEmail': 'typed@example.com', 'packageType': ['basic']
            })
        assert DatabaseManager(Verification).count() == 0

    def test_failed_create_rolls_back(self, verification_service, employer):
        """Test a database failure leaves no partial request behind"""
        with patch('credcheck.services.verification_service.seed_item_types',
                   side_effect=SQLAlchemyError('disk I/O error')):
            with pytest.raises(StoreError) as exc_info:
                verification_service.create_verification(employer['user']['id'], {
                    'candidateName': 'Rollback', 'candidateEmail': 'rollback@example.com', 'packageType': 'basic'
                })

        assert exc_info.value.status_code == 500
        assert str(exc_info.value) == 'Database error'
        assert DatabaseManager(Candidate).count() == 0
        assert DatabaseManager(Verification).count() == 0
        assert DatabaseManager(VerificationItem).count() == 0

    def test_invitation_email(self, verification_service, employer):
        """Test the candidate is emailed a registration link"""
        with patch.object(SendGridClient, 'send_verification_invitation') as mock_send:
            result = verification_service.create_verification(employer['user']['id'], {
                'candidateName': 'Mail Test',
                'candidateEmail': 'mail@example.com',
                'position': 'Analyst',
                'packageType': 'basic'
            })

        mock_send.assert_called_once()
        args = mock_send.call_args[0]
        assert args[0] == 'mail@example.com'
        assert args[3] == 'Analyst'
        assert args[4].endswith(f"/register?candidateId={result['candidateId']}")

    def test_email_failure_does_not_fail_request(self, verification_service, employer):
        """Test send errors are logged, not raised"""
        with patch.object(SendGridClient, 'send_verification_invitation', side_effect=Exception('down')):
            result = verification_service.create_verification(employer['user']['id'], {
                'candidateName': 'Mail Test', 'candidateEmail': 'mail@example.com', 'packageType': 'basic'
            })
        assert result['id']


class TestSubmitRecords:
    """Test candidate submissions"""

    def test_submit_moves_to_in_progress(self, verification_service, employer, invited, candidate):
        """Test submission starts processing"""
        result = verification_service.submit_candidate_records(invited['id'], candidate['user']['id'], {
            'education': [{'institution': 'State University', 'degree': 'BSc'}],
            'employment': [{'companyName': 'Widgets Inc', 'jobTitle': 'Developer'}],
            'references': [{'name': 'Bob Boss', 'relationship': 'Manager'}]
        })
        assert result['submitted'] == {'education': 1, 'employment': 1, 'references': 1}

        verification = verification_service.get_verification(invited['id'], candidate_user(candidate))
        assert verification['status'] == 'in_progress'
        assert len(verification['items']) == 5
        assert all(item['status'] in ('pending', 'verifying', 'verified') for item in verification['items'])

    def test_empty_and_repeated_submission(self, verification_service, invited, candidate):
        """Test empty submissions are accepted and may be repeated"""
        verification_service.submit_candidate_records(invited['id'], candidate['user']['id'], {})
        result = verification_service.submit_candidate_records(invited['id'], candidate['user']['id'], {})
        assert result['submitted'] == {'education': 0, 'employment': 0, 'references': 0}

    def test_incomplete_record_rejected(self, verification_service, invited, candidate):
        """Test each record needs its key fields"""
        with pytest.raises(ValidationError, match='degree'):
            verification_service.submit_candidate_records(invited['id'], candidate['user']['id'], {
                'education': [{'institution': 'State University'}]
            })

    def test_other_candidate_rejected(self, verification_service, invited, candidate):
        """Test a candidate cannot submit to someone else's verification"""
        stranger = AuthService().register_candidate({
            'email': 'stranger@example.com', 'password': 'SecurePass123', 'name': 'Stranger'
        })
        with pytest.raises(AuthError) as exc_info:
            verification_service.submit_candidate_records(invited['id'], stranger['user']['id'], {})
        assert exc_info.value.status_code == 403


class TestStatusTransitions:
    """Test verification and item state machines"""

    def test_illegal_verification_transition(self, verification_service, employer, invited):
        """Test invited cannot jump to completed"""
        with pytest.raises(StateError):
            verification_service.update_verification_status(invited['id'], 'completed', employer_user(employer))

    def test_unknown_status(self, verification_service, employer, invited):
        """Test statuses outside the enum are rejected"""
        with pytest.raises(ValidationError):
            verification_service.update_verification_status(invited['id'], 'archived', employer_user(employer))

    def test_completed_is_terminal(self, verification_service, employer, invited, candidate):
        """Test nothing leaves completed"""
        verification_service.submit_candidate_records(invited['id'], candidate['user']['id'], {})
        AdminService().complete_verification(invited['id'])

        verification = verification_service.get_verification(invited['id'], employer_user(employer))
        assert verification['status'] == 'completed'
        assert verification['completion_date'] is not None

        with pytest.raises(StateError):
            verification_service.update_verification_status(invited['id'], 'in_progress', employer_user(employer))
        with pytest.raises(StateError):
            verification_service.submit_candidate_records(invited['id'], candidate['user']['id'], {})

    def test_employer_cannot_complete(self, verification_service, employer, admin, invited, candidate):
        """Test completion only happens together with credential issuance"""
        verification_service.submit_candidate_records(invited['id'], candidate['user']['id'], {})

        with pytest.raises(StateError, match='/api/admin/verifications/'):
            verification_service.update_verification_status(invited['id'], 'completed', employer_user(employer))
        with pytest.raises(StateError):
            verification_service.update_verification_status(
                invited['id'], 'completed', {'user_id': admin['user_id'], 'role': 'admin'}
            )

        verification = verification_service.get_verification(invited['id'], employer_user(employer))
        assert verification['status'] == 'in_progress'
        assert verification['completion_date'] is None
        assert DatabaseManager(Credential).count() == 0

        result = AdminService().complete_verification(invited['id'])
        assert DatabaseManager(Credential).get(result['credentialId']) is not None
        verification = verification_service.get_verification(invited['id'], employer_user(employer))
        assert all(item['status'] == 'verified' for item in verification['items'])

    def test_candidate_cannot_update_status(self, verification_service, invited, candidate):
        """Test candidates do not drive verification status"""
        with pytest.raises(AuthError):
            verification_service.update_verification_status(invited['id'], 'review_needed', candidate_user(candidate))

    def test_item_transitions(self, verification_service, employer, invited):
        """Test item status rules"""
        item = verification_service.get_verification(invited['id'], employer_user(employer))['items'][0]

        updated = verification_service.update_item_status(invited['id'], item['id'], {'status': 'verified'})
        assert updated['status'] == 'verified'
        assert updated['verified_date'] is not None

        with pytest.raises(StateError):
            verification_service.update_item_status(invited['id'], item['id'], {'status': 'verifying'})

    def test_item_details_round_trip(self, verification_service, employer, invited):
        """Test structured item details come back unchanged"""
        item = verification_service.get_verification(invited['id'], employer_user(employer))['items'][1]
        details = {'institution': 'State University', 'checks': [1, 2, 3], 'nested': {'ok': True, 'score': 0.95}}

        verification_service.update_item_status(invited['id'], item['id'], {'details': details})

        fetched = verification_service.get_verification(invited['id'], employer_user(employer))
        stored = next(i for i in fetched['items'] if i['id'] == item['id'])
        assert stored['details'] == details

    def test_unknown_item(self, verification_service, invited):
        """Test item lookups are scoped to their verification"""
        with pytest.raises(NotFoundError):
            verification_service.update_item_status(invited['id'], 'missing', {'status': 'verified'})

    def test_null_only_update_rejected(self, verification_service, employer, invited):
        """Test an update needs at least one non-null field"""
        item = verification_service.get_verification(invited['id'], employer_user(employer))['items'][0]

        with pytest.raises(ValidationError):
            verification_service.update_item_status(invited['id'], item['id'], {'status': None})
        with pytest.raises(ValidationError):
            verification_service.update_item_status(invited['id'], item['id'], {'result': None, 'details': None})
        assert DatabaseManager(VerificationItem).get(item['id']).status.value == 'pending'

    def test_warning_result_flags_review(self, verification_service, employer, invited):
        """Test warning and failed results land in the review queue"""
        items = verification_service.get_verification(invited['id'], employer_user(employer))['items']
        by_type = {item['type']: item for item in items}

        verification_service.update_item_status(invited['id'], by_type['education']['id'], {
            'result': 'warning', 'details': {'issue': 'Diploma metadata edited'}
        })
        verification_service.update_item_status(invited['id'], by_type['criminal']['id'], {'result': 'failed'})

        queue = ReviewService().list_queue()
        assert [entry['priority'] for entry in queue] == ['high', 'normal']
        assert queue[1]['issue_description'] == 'Diploma metadata edited'
        assert queue[0]['item_type'] == 'criminal'
        assert queue[0]['candidate_name'] == 'Jane Candidate'
        assert queue[0]['employer_name'] == 'Acme Corp'


class TestAccess:
    """Test tenant isolation"""

    def test_other_employer_denied(self, verification_service, invited):
        """Test an employer cannot read another company's verification"""
        rival = AuthService().register_employer({
            'email': 'rival@example.com',
            'password': 'SecurePass123',
            'name': 'Rival HR',
            'companyName': 'Rival Corp'
        })
        with pytest.raises(AuthError) as exc_info:
            verification_service.get_verification(invited['id'], employer_user(rival))
        assert exc_info.value.status_code == 403

    def test_admin_can_read(self, verification_service, invited, admin):
        """Test admins see every verification"""
        verification = verification_service.get_verification(
            invited['id'], {'user_id': admin['user_id'], 'role': 'admin'}
        )
        assert verification['employer_name'] == 'Acme Corp'

    def test_unknown_verification(self, verification_service, employer):
        """Test missing ids are 404"""
        with pytest.raises(NotFoundError):
            verification_service.get_verification('missing', employer_user(employer))


class TestListings:
    """Test dashboard listings"""

    def test_employer_list_and_stats(self, verification_service, employer, invited, candidate):
        """Test employer listing and status counts"""
        verification_service.create_verification(employer['user']['id'], {
            'candidateName': 'Second', 'candidateEmail': 'second@example.com', 'packageType': 'basic'
        })
        verification_service.submit_candidate_records(invited['id'], candidate['user']['id'], {})

        listed = verification_service.list_for_employer(employer['user']['id'])
        assert len(listed) == 2
        assert {v['candidate_name'] for v in listed} == {'Jane Candidate', 'Second'}

        stats = verification_service.get_employer_stats(employer['user']['id'])
        assert stats['total'] == 2
        assert stats['invited'] == 1
        assert stats['in_progress'] == 1
        assert stats['completed'] == 0
        assert stats['avgCompletionHours'] is None

    def test_candidate_list(self, verification_service, invited, candidate):
        """Test candidates see their own verifications"""
        listed = verification_service.list_for_candidate(candidate['user']['id'])
        assert [v['id'] for v in listed] == [invited['id']]
        assert listed[0]['employer_name'] == 'Acme Corp'
