from lumir_auth.services.mail.service import TEMPLATES, MailService, MailTemplate

__all__ = ["MailService", "MailTemplate", "TEMPLATES"]
