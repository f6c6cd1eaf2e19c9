import logging
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def _resolve_ssm_secrets() -> None:
    """Lambda 환경에서 SSM Parameter Store의 SecureString 값을 환경 변수로 설정합니다.

    SSM 파라미터 이름은 Lambda 환경변수 DB_PASSWORD_SSM_NAME, SECRET_KEY_SSM_NAME,
    SMTP_PASSWORD_SSM_NAME에 지정.
    pydantic-settings가 환경변수에서 값을 읽기 전에 호출해야 합니다.
    """
    if os.getenv("AWS_LAMBDA_EXEC") != "true":
        return

    ssm_mappings = {
        "DB_PASSWORD": os.getenv("DB_PASSWORD_SSM_NAME"),
        "SECRET_KEY": os.getenv("SECRET_KEY_SSM_NAME"),
        "SMTP_PASSWORD": os.getenv("SMTP_PASSWORD_SSM_NAME"),
    }

    params_to_fetch = {k: v for k, v in ssm_mappings.items() if v}
    if not params_to_fetch:
        return

    import boto3  # Lambda 런타임에 기본 포함

    ssm = boto3.client("ssm")

    # 배치 API로 한 번에 조회 (콜드스타트 지연 최소화)
    try:
        response = ssm.get_parameters(
            Names=list(params_to_fetch.values()),
            WithDecryption=True,
        )
    except Exception:
        logger.exception("SSM 배치 파라미터 조회 실패")
        raise

    if response.get("InvalidParameters"):
        raise RuntimeError(
            f"SSM 파라미터 조회 실패: {response['InvalidParameters']}"
        )

    # 모든 파라미터 조회 성공 후 환경변수 일괄 설정
    name_to_env = {v: k for k, v in params_to_fetch.items()}
    resolved = {}
    for param in response["Parameters"]:
        env_var = name_to_env[param["Name"]]
        resolved[env_var] = param["Value"]

    for env_var, value in resolved.items():
        os.environ[env_var] = value


# Settings 인스턴스 생성 전에 SSM에서 시크릿을 환경변수로 설정
_resolve_ssm_secrets()


class Settings(BaseSettings):
    """관리자 백오피스 설정을 관리하는 클래스.

    환경 변수에서 설정을 로드하며, 기본값을 제공합니다.

    Attributes:
        SECRET_KEY: 관리자 Access Token 서명 키.
        ALLOWED_ORIGINS: CORS 허용 오리진 목록 (관리자 UI).
        DB_HOST: MySQL 호스트 주소.
        DB_PORT: MySQL 포트 번호.
        DB_USER: MySQL 사용자명.
        DB_PASSWORD: MySQL 비밀번호.
        DB_NAME: MySQL 데이터베이스 이름.
        LIST_FETCH_LIMIT: 목록 화면 한 테이블당 최대 조회 행 수.
        BLOCK_DURATION_DAYS: block_user 프로시저가 적용하는 차단 기간 (안내 메시지용).
        REALTIME_POLL_INTERVAL_SECONDS: change_log 테이블 폴링 주기.
    """

    SECRET_KEY: str
    ALLOWED_ORIGINS: list[str] = [
        "http://127.0.0.1:5173",  # 로컬 개발 (관리자 UI)
        "http://localhost:5173",  # 로컬 개발 (관리자 UI)
    ]

    DB_HOST: str
    DB_PORT: int
    DB_USER: str
    DB_PASSWORD: str
    DB_NAME: str

    JWT_ACCESS_EXPIRE_MINUTES: int = 60

    # 프로덕션에서는 False로 설정하여 상세 에러 메시지 노출 방지
    DEBUG: bool = True

    RATE_LIMIT_MAX_KEYS: int = 10000  # 메모리 보호를 위한 최대 추적 (IP, 경로) 수
    TRUSTED_PROXIES: set[str] = set()  # 프로덕션에서 nginx 등의 프록시 IP 설정 필요

    # 목록 조회 상한 (테이블당)
    LIST_FETCH_LIMIT: int = 500
    BLOCK_DURATION_DAYS: int = 21

    # 실시간 갱신
    REALTIME_POLL_INTERVAL_SECONDS: float = 2.0
    REALTIME_ENABLED: bool = True

    # 관리자 2단계 인증
    TWO_FACTOR_CODE_TTL_MINUTES: int = 10
    TWO_FACTOR_MAX_ATTEMPTS: int = 5

    # 이메일 발송 설정
    EMAIL_BACKEND: str = "smtp"  # "ses" (프로덕션) | "smtp" (로컬)
    EMAIL_FROM: str = "noreply@autinoa.com"
    EMAIL_SENDER_NAME: str = "Autinoa"
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SES_REGION: str = "eu-central-1"

    # 파일 저장소 설정
    STORAGE_TYPE: str = "local"  # "s3" | "local"
    UPLOAD_DIR: str = "uploads"
    AWS_REGION: str = "eu-central-1"
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_S3_BUCKET_NAME: str = "autinoa-uploads"
    CLOUDFRONT_DOMAIN: str = ""
    SIGNED_URL_EXPIRES: int = 60

    # 관리자 UI URL (알림 메일 링크 등에 사용)
    FRONTEND_URL: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


settings = Settings()  # type: ignore[call-arg]  # pydantic-settings는 .env에서 환경 변수를 불러옴.
