"""성적 서비스 계층 예외

라우터는 이 예외들을 잡지 않고 그대로 올려 보내며,
middlewares/error_handler.py 가 status_code/code 를 읽어 공통 에러 포맷으로 응답한다.
"""


class GradebookError(Exception):
    """서비스 계층 예외의 기반 클래스"""

    status_code = 500
    code = "GRADEBOOK_ERROR"
    headers = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(GradebookError):
    """학생/강좌/수강/성적 등 참조 대상이 없을 때"""

    status_code = 404
    code = "NOT_FOUND"


class Unauthorized(GradebookError):
    """변경 API 의 내부 토큰 누락/불일치"""

    status_code = 401
    code = "UNAUTHORIZED"
    headers = {"WWW-Authenticate": "Bearer"}


class Conflict(GradebookError):
    """유니크 제약 충돌 (과목 코드, 강좌 개설, 이메일 중복 등)"""

    status_code = 409
    code = "CONFLICT"


class PolicyInvalid(GradebookError):
    """평가 비율 다섯 항목의 합이 100이 아닐 때"""

    status_code = 400
    code = "POLICY_INVALID"


class InvalidLetterGrade(GradebookError):
    status_code = 400
    code = "INVALID_LETTER_GRADE"


class EnrollmentRejected(GradebookError):
    """수강 신청/취소 조건 위반 (정원 초과, 중복 신청 등)"""

    status_code = 400
    code = "ENROLLMENT_REJECTED"


class GradeFinalized(GradebookError):
    """확정된 성적을 수정하려 할 때"""

    status_code = 409
    code = "GRADE_FINALIZED"


class GradeAlreadyFinalized(GradebookError):
    """이미 확정된 성적을 다시 확정하려 할 때"""

    status_code = 409
    code = "GRADE_ALREADY_FINALIZED"


class GradeConflict(Conflict):
    """(학생, 강좌) 유니크 인덱스 충돌 - 동시 입력"""

    code = "GRADE_CONFLICT"
