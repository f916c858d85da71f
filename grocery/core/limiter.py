from slowapi import Limiter

from grocery.features.users.dependencies import get_authorization_header

limiter = Limiter(key_func=get_authorization_header)
