"""Password hashing for accounts."""

from django.conf import settings
from django.contrib.auth.hashers import BCryptPasswordHasher as DjangoBCryptPasswordHasher

# bcrypt only reads this many bytes of the password
BCRYPT_MAX_PASSWORD_BYTES = 72


class BCryptPasswordHasher(DjangoBCryptPasswordHasher):
    """
    Plain bcrypt with the work factor taken from settings.

    Hashes are encoded as ``bcrypt$<bcrypt hash>``; the salt and cost
    are embedded in the bcrypt part, so a stored value can be verified
    without any other state. Passwords are cut to their first 72 UTF-8
    bytes before hashing, which is what bcrypt itself has always
    considered; newer bcrypt releases raise instead of cutting.
    ``verify`` re-encodes through ``encode``, so checks get the same cut.
    """

    @property
    def rounds(self):
        return getattr(settings, 'PASSWORD_HASH_ROUNDS', 10)

    def encode(self, password, salt):
        bcrypt = self._load_library()
        secret = password.encode('utf-8')[:BCRYPT_MAX_PASSWORD_BYTES]
        data = bcrypt.hashpw(secret, salt)
        return "%s$%s" % (self.algorithm, data.decode('ascii'))
