from .observer import Notice, NoticeLog, NoticeSubject
from .reveal_proxy import RevealProxy
from .profile_checks import validate_profile

__all__ = [
    'Notice', 'NoticeLog', 'NoticeSubject', 'RevealProxy', 'validate_profile'
]
