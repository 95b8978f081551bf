from address6d.services.code import CodeService
from address6d.services.geocoding import GeocodingService
from .registration import RegistrationService
from .verification import PhoneVerificationService

__all__ = ["CodeService", "GeocodingService", "RegistrationService", "PhoneVerificationService"]
