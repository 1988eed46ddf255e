#!/usr/bin/env python3
"""
Script to seed the database with sample data for testing
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, timedelta
from credcheck.database import init_db, drop_db, get_db
from credcheck.models import (
    User, Employer, Candidate, EducationRecord, EmploymentRecord, Verification, VerificationItem
)
from credcheck.models.user import UserRole
from credcheck.models.candidate import CandidateStatus
from credcheck.models.verification import VerificationStatus, ItemStatus, ItemResult, ItemType
from credcheck.services.admin_service import AdminService
from credcheck.services.verification_service import package_price
from credcheck.utils.security import hash_password

SAMPLE_PASSWORD = 'Password123'


def create_users(db):
    """Create admin, employer and candidate accounts"""
    password_hash = hash_password(SAMPLE_PASSWORD)

    admin = User(
        email='admin@credcheck.io',
        password_hash=password_hash,
        role=UserRole.ADMIN,
        name='System Admin',
        phone='+971501234567'
    )
    db.add(admin)

    employer_user = User(
        email='hr@techsolutions.com',
        password_hash=password_hash,
        role=UserRole.EMPLOYER,
        name='Sarah Ahmed',
        phone='+971502345678'
    )
    db.add(employer_user)

    candidate_user = User(
        email='ahmed.ali@email.com',
        password_hash=password_hash,
        role=UserRole.CANDIDATE,
        name='Ahmed Ali',
        phone='+971503456789'
    )
    db.add(candidate_user)
    db.flush()

    employer = Employer(
        user_id=employer_user.id,
        company_name='Tech Solutions LLC',
        company_size='50-100',
        industry='Technology',
        location='Dubai, UAE'
    )
    db.add(employer)

    candidates = {
        'ahmed': Candidate(user_id=candidate_user.id, name='Ahmed Ali', email='ahmed.ali@email.com',
                           phone='+971503456789', status=CandidateStatus.ACTIVE),
        # Invited, no account yet
        'fatima': Candidate(name='Fatima Hassan', email='fatima.hassan@email.com',
                            phone='+971504567890', status=CandidateStatus.INVITED),
        'mohammed': Candidate(name='Mohammed Ibrahim', email='mohammed.i@email.com',
                              phone='+971505678901', status=CandidateStatus.ACTIVE),
        'sara': Candidate(name='Sara Abdullah', email='sara.abd@email.com',
                          phone='+971506789012', status=CandidateStatus.ACTIVE)
    }
    db.add_all(candidates.values())
    db.flush()

    print("Created 3 users and 4 candidates")
    return employer, candidates


def create_records(db, candidates):
    """Create education and employment history"""
    db.add_all([
        EducationRecord(candidate_id=candidates['mohammed'].id, institution='Dubai University',
                        degree='Bachelor of Science', field_of_study='Computer Science',
                        start_date='2014', end_date='2018', verification_status='verified'),
        EducationRecord(candidate_id=candidates['sara'].id, institution='American University of Sharjah',
                        degree='MBA', field_of_study='Marketing',
                        start_date='2014', end_date='2016', verification_status='verified'),
        EmploymentRecord(candidate_id=candidates['mohammed'].id, company_name='TechCorp Dubai',
                         job_title='Software Developer', start_date='2019-01', end_date='2022-12',
                         supervisor_name='Ahmad Hassan', supervisor_contact='hr@techcorp.ae',
                         verification_status='verified'),
        EmploymentRecord(candidate_id=candidates['sara'].id, company_name='Global Marketing Solutions',
                         job_title='Marketing Specialist', start_date='2017-03', end_date='2023-06',
                         supervisor_name='Sarah Johnson', supervisor_contact='hr@gms.com',
                         verification_status='verified')
    ])
    print("Created 4 history records")


def create_verification(db, employer, candidate, position, package_type, days_ago, item_outcomes):
    """Create an in-progress verification whose checks already have outcomes"""
    initiated = datetime.utcnow() - timedelta(days=days_ago)
    verification = Verification(
        employer_id=employer.id,
        candidate_id=candidate.id,
        position=position,
        package_type=package_type,
        status=VerificationStatus.IN_PROGRESS,
        price=package_price(package_type),
        initiated_date=initiated
    )
    db.add(verification)
    db.flush()

    for offset, (item_type, result, details) in enumerate(item_outcomes):
        db.add(VerificationItem(
            verification_id=verification.id,
            type=item_type,
            status=ItemStatus.VERIFIED,
            result=result,
            details=details,
            verified_date=initiated + timedelta(days=1),
            created_at=initiated + timedelta(seconds=offset)
        ))
    return verification


def create_verifications(db, employer, candidates):
    """Create the sample verifications"""
    to_complete = [
        create_verification(db, employer, candidates['mohammed'], 'Senior Software Engineer', 'standard', 5, [
            (ItemType.IDENTITY, ItemResult.VERIFIED,
             {'method': 'biometric', 'document_type': 'Emirates ID', 'confidence': 0.98}),
            (ItemType.EDUCATION, ItemResult.WARNING,
             {'institution': 'Dubai University',
              'issue': 'Digital modifications detected in submitted diploma document'}),
            (ItemType.EMPLOYMENT, ItemResult.VERIFIED,
             {'company': 'TechCorp Dubai', 'verified_duration': 'Jan 2019 - Dec 2022'}),
            (ItemType.CRIMINAL, ItemResult.VERIFIED,
             {'jurisdiction': 'UAE', 'result': 'No records found'}),
            (ItemType.REFERENCE, ItemResult.VERIFIED,
             {'references_contacted': 2, 'references_completed': 2, 'overall_sentiment': 'positive'})
        ]),
        create_verification(db, employer, candidates['sara'], 'Marketing Manager', 'comprehensive', 10, [
            (ItemType.IDENTITY, ItemResult.VERIFIED,
             {'method': 'document_verification', 'document_type': 'Passport', 'confidence': 0.99}),
            (ItemType.EDUCATION, ItemResult.VERIFIED,
             {'institution': 'American University of Sharjah', 'degree': 'MBA Marketing'}),
            (ItemType.EMPLOYMENT, ItemResult.WARNING,
             {'company': 'Global Marketing Solutions',
              'issue': 'Claimed start date Mar 2017, employer records show Jun 2017'}),
            (ItemType.CRIMINAL, ItemResult.VERIFIED,
             {'jurisdiction': 'UAE + International', 'result': 'No records found'}),
            (ItemType.REFERENCE, ItemResult.VERIFIED,
             {'references_contacted': 3, 'references_completed': 3, 'overall_sentiment': 'very_positive'})
        ])
    ]

    # Open request awaiting the invited candidate
    invited = Verification(
        employer_id=employer.id,
        candidate_id=candidates['fatima'].id,
        position='Data Analyst',
        package_type='basic',
        status=VerificationStatus.INVITED,
        price=package_price('basic')
    )
    db.add(invited)
    db.flush()
    for item_type in (ItemType.IDENTITY, ItemType.EDUCATION, ItemType.EMPLOYMENT):
        db.add(VerificationItem(verification_id=invited.id, type=item_type, status=ItemStatus.PENDING))

    print("Created 3 verifications")
    return [v.id for v in to_complete]


def main():
    """Main seeding function"""
    print("Dropping existing database...")
    drop_db()

    print("Initializing new database...")
    init_db()

    with get_db() as db:
        employer, candidates = create_users(db)
        create_records(db, candidates)
        completed_ids = create_verifications(db, employer, candidates)

    print("Completing verifications and issuing credentials...")
    admin_service = AdminService()
    for verification_id in completed_ids:
        result = admin_service.complete_verification(verification_id)
        print(f"  {result['credentialId']} -> {result['verificationUrl']}")

    print("\nDatabase seeded successfully!")
    print("\nSample accounts (password: {}):".format(SAMPLE_PASSWORD))
    print("  Admin: admin@credcheck.io")
    print("  Employer: hr@techsolutions.com")
    print("  Candidate: ahmed.ali@email.com")


if __name__ == '__main__':
    main()
