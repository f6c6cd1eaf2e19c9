"""verification_code: 6자리 인증 코드 생성 및 해시 유틸리티.

관리자 2단계 인증과 전화번호 인증 재발송에 사용합니다.
코드는 평문으로 저장하지 않고 SHA-256 해시만 저장합니다.
"""

import hashlib
import hmac
import secrets

CODE_LENGTH = 6


def generate_verification_code() -> str:
    """암호학적으로 안전한 6자리 숫자 코드를 생성합니다.

    Returns:
        앞자리 0을 포함할 수 있는 6자리 문자열.
    """
    return f"{secrets.randbelow(10**CODE_LENGTH):0{CODE_LENGTH}d}"


def hash_verification_code(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def verify_code_hash(code: str, code_hash: str) -> bool:
    """입력 코드가 저장된 해시와 일치하는지 상수 시간으로 비교합니다."""
    return hmac.compare_digest(hash_verification_code(code), code_hash)
