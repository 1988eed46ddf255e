import sendgrid
from sendgrid.helpers.mail import Mail, Email, To, Content
from typing import Dict, Optional
from config.config import Config
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)


class SendGridClient:
    """Wrapper for SendGrid email operations"""

    def __init__(self):
        self.api_key = Config.SENDGRID_API_KEY
        self.from_email = Config.SENDGRID_FROM_EMAIL

        if self.api_key:
            self.client = sendgrid.SendGridAPIClient(api_key=self.api_key)
        else:
            self.client = None
            logger.warning("SendGrid API key not configured")

    def send_email(self, to_email: str, subject: str, html_content: str,
                   plain_content: str = None) -> Optional[Dict]:
        """Send email via SendGrid"""
        if not self.client:
            logger.info(f"Email to {to_email} skipped: SendGrid client not initialized")
            return None

        try:
            message = Mail(
                from_email=Email(self.from_email, "CredCheck"),
                to_emails=To(to_email),
                subject=subject,
                html_content=Content("text/html", html_content)
            )

            if plain_content:
                message.plain_text_content = Content("text/plain", plain_content)

            response = self.client.send(message)

            return {
                'status_code': response.status_code,
                'message_id': response.headers.get('X-Message-Id')
            }
        except Exception as e:
            logger.error(f"Error sending email to {to_email}: {str(e)}")
            return None

    def send_verification_invitation(self, to_email: str, candidate_name: str, employer_name: str,
                                     position: str, register_link: str) -> Optional[Dict]:
        """Invite a candidate to complete a background check"""
        subject = f"{employer_name} has requested a background check"
        html_content = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <h2>Background Check Request</h2>
                <p>Hi {candidate_name},</p>
                <p>{employer_name} has requested a background check for the position of
                   <strong>{position or 'an open role'}</strong>.</p>
                <p>Please sign in or create your account to submit your education,
                   employment and reference details.</p>
                <p style="margin: 30px 0;">
                    <a href="{register_link}"
                       style="background-color: #1a73e8; color: white; padding: 14px 28px;
                              text-decoration: none; border-radius: 4px; display: inline-block;">
                        Start Verification
                    </a>
                </p>
                <p>Or copy and paste this link: {register_link}</p>
            </body>
        </html>
        """
        plain_content = f"""
        Hi {candidate_name},

        {employer_name} has requested a background check for the position of {position or 'an open role'}.
        Start here: {register_link}
        """

        return self.send_email(to_email, subject, html_content, plain_content)

    def send_credential_issued(self, to_email: str, candidate_name: str, title: str,
                               verification_url: str) -> Optional[Dict]:
        """Tell a candidate a credential is ready"""
        subject = f"Your credential is ready - {title}"
        html_content = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <h2>Credential Issued</h2>
                <p>Hi {candidate_name},</p>
                <p>Your <strong>{title}</strong> credential has been issued and is ready to share.</p>
                <p>Anyone can confirm it at: <a href="{verification_url}">{verification_url}</a></p>
            </body>
        </html>
        """

        return self.send_email(to_email, subject, html_content)

    def send_credential_share(self, to_email: str, candidate_name: str, share_link: str,
                              expires_date: Optional[str] = None) -> Optional[Dict]:
        """Send a share link to a third party"""
        subject = f"{candidate_name} shared a verified credential with you"
        expiry_line = f"<p>This link expires on {expires_date}.</p>" if expires_date else ""
        html_content = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <h2>Verified Credential</h2>
                <p>{candidate_name} has shared a background check credential with you.</p>
                <p style="margin: 30px 0;">
                    <a href="{share_link}"
                       style="background-color: #4CAF50; color: white; padding: 14px 28px;
                              text-decoration: none; border-radius: 4px; display: inline-block;">
                        View Credential
                    </a>
                </p>
                {expiry_line}
            </body>
        </html>
        """

        return self.send_email(to_email, subject, html_content)
