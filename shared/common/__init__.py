# Shared Common Library for the Training Administration Platform
# Exceptions, model mixins, middleware, authentication and pagination
# shared by the platform's Django services.

__version__ = "1.0.0"

from .exceptions import (
    BaseAPIException,
    BadRequestException,
    ValidationException,
    NotFoundException,
    InternalServerException,
    NoCandidateQuestionsException,
    ExamPersistenceException,
)

__all__ = [
    '__version__',
    'BaseAPIException',
    'BadRequestException',
    'ValidationException',
    'NotFoundException',
    'InternalServerException',
    'NoCandidateQuestionsException',
    'ExamPersistenceException',
]
