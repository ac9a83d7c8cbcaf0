from .signature import PrivateKeySigner, SignedHttp

__all__ = ['PrivateKeySigner', 'SignedHttp']
