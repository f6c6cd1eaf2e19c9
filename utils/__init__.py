"""utils: 유틸리티 함수들을 모아놓은 패키지.

Modules:
    password: 비밀번호 해싱 및 검증
    jwt_utils: 관리자 Access Token 발급/검증
    verification_code: 인증 코드 생성 및 해시
    filters: 목록 화면 텍스트 필터
    processing: 항목별 중복 처리 방지
    upload: 파일 검증 및 업로드
    s3_utils: S3 저장소
    storage: 로컬 파일 저장소
    email: 이메일 발송
    formatters: 날짜/시간 포맷팅
    exceptions: HTTP 에러 헬퍼
"""
