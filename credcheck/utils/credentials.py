"""
Credential documents and content fingerprints.

The ``signature`` stored on a credential is a SHA-256 content fingerprint,
not a digital signature. Anyone holding the same fields can recompute it, so
it only shows that the stored fields have not changed since issuance. It says
nothing about who issued the credential. Real authenticity would need
asymmetric signing with per-issuer keys.
"""

import hashlib
import json
from datetime import datetime
from typing import Dict, List, Optional
from config.config import Config

CONTEXT = [
    'https://www.w3.org/2018/credentials/v1',
    'https://credcheck.io/credentials/v1'
]


def _canonical_json(data) -> str:
    return json.dumps(data, sort_keys=True, separators=(',', ':'), default=str)


def content_fingerprint(credential_id: str, credential_type: str, title: str,
                        details, issued: datetime) -> str:
    """SHA-256 over the issuance-time fields of a credential"""
    payload = {
        'id': credential_id,
        'type': credential_type,
        'title': title,
        'details': details,
        'issued': issued.isoformat()
    }
    return hashlib.sha256(_canonical_json(payload).encode('utf-8')).hexdigest()


def document_fingerprint(document: Dict) -> str:
    """SHA-256 over the identifying parts of a credential document"""
    payload = {
        'id': document.get('id'),
        'issuer': document.get('issuer', {}).get('id'),
        'issuanceDate': document.get('issuanceDate'),
        'subject': document.get('credentialSubject')
    }
    return hashlib.sha256(_canonical_json(payload).encode('utf-8')).hexdigest()


class VerifiableCredentialDocument:
    """W3C Verifiable Credentials shaped record of a verification outcome"""

    def __init__(self, credential_id: str, credential_type: str, subject: Dict,
                 issuance_date: datetime, expiration_date: Optional[datetime] = None,
                 evidence: Optional[List[Dict]] = None):
        self.credential_id = credential_id
        self.credential_type = credential_type
        self.subject = subject
        self.issuance_date = issuance_date
        self.expiration_date = expiration_date
        self.evidence = evidence or []

    def to_dict(self) -> Dict:
        document = {
            '@context': CONTEXT,
            'id': self.credential_id,
            'type': ['VerifiableCredential', self.credential_type],
            'issuer': {
                'id': Config.ISSUER_DID,
                'name': Config.ISSUER_NAME,
                'url': Config.APP_URL
            },
            'issuanceDate': self.issuance_date.isoformat(),
            'expirationDate': self.expiration_date.isoformat() if self.expiration_date else None,
            'credentialSubject': self.subject,
            'evidence': self.evidence,
            'credentialStatus': {
                'id': f"{Config.APP_URL}/api/credentials/verify/{self.credential_id}",
                'type': 'CredentialStatusList2021'
            }
        }
        document['fingerprint'] = document_fingerprint(document)
        return document


def background_check_document(credential_id: str, candidate_id: str, candidate_name: str,
                              outcome: Dict, issuance_date: datetime,
                              expiration_date: Optional[datetime] = None) -> Dict:
    """Build the document embedded in a completed verification's credential"""
    subject = {
        'id': f"did:credcheck:candidate:{candidate_id}",
        'name': candidate_name,
        'backgroundCheck': {
            'verificationId': outcome['verification_id'],
            'employer': outcome['employer'],
            'position': outcome['position'],
            'packageType': outcome['package_type'],
            'checksCompleted': outcome['checks_completed'],
            'overallResult': outcome['overall_result'],
            'warnings': outcome['warnings'],
            'completionDate': outcome['completion_date']
        }
    }
    evidence = [
        {
            'type': 'VerificationItem',
            'check': check,
            'result': result,
            'verifier': Config.ISSUER_NAME
        }
        for check, result in outcome['checks_completed'].items()
    ]
    return VerifiableCredentialDocument(
        credential_id,
        'BackgroundCheckCredential',
        subject,
        issuance_date,
        expiration_date,
        evidence
    ).to_dict()
