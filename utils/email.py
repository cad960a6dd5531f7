# utils/email.py
import base64
import html
import logging

import requests

import config

logger = logging.getLogger(__name__)

BREVO_URL = "https://api.brevo.com/v3/smtp/email"


def send_invoice_email(to_email: str, subject: str, message: str, filename: str, pdf: bytes):
     """Send an exported invoice PDF as an attachment through Brevo."""
     if not config.BREVO_API_KEY:
          raise RuntimeError("BREVO_API_KEY is not set")

     html_body = "<br>".join(html.escape(line) for line in message.splitlines())
     response = requests.post(
          BREVO_URL,
          headers={
               "api-key": config.BREVO_API_KEY,
               "Content-Type": "application/json",
          },
          json={
               "sender": {"name": config.MAIL_SENDER_NAME, "email": config.MAIL_SENDER_EMAIL},
               "to": [{"email": to_email}],
               "subject": subject,
               "htmlContent": f"<p>{html_body}</p>",
               "attachment": [
                    {"name": filename, "content": base64.b64encode(pdf).decode("ascii")}
               ],
          },
          timeout=10,
     )
     if response.status_code not in (200, 201):
          logger.error("Brevo rejected invoice mail to %s: %s", to_email, response.text)
          raise RuntimeError(f"Brevo error: {response.text}")
