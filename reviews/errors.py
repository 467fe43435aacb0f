from django.core.exceptions import ObjectDoesNotExist


class BusinessError(Exception):
    """
    Ожидаемая ошибка предметной области с машиночитаемым кодом
    """

    code = 'BUSINESS_ERROR'

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self):
        return self.message


class NotFoundError(BusinessError, ObjectDoesNotExist):
    code = 'NOT_FOUND'


class AlreadyExistsError(BusinessError):
    code = 'PR_EXISTS'


class PRMergedError(BusinessError):
    code = 'PR_MERGED'


class NotAssignedError(BusinessError):
    code = 'NOT_ASSIGNED'


class NoCandidateError(BusinessError):
    code = 'NO_CANDIDATE'


class TeamExistsError(BusinessError):
    code = 'TEAM_EXISTS'
