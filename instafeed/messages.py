"""User-facing error messages (ko)."""

SERVER_ERROR = "서버 오류가 발생했습니다."
BAD_REQUEST = "잘못된 요청입니다."
AUTH_REQUIRED = "인증이 필요합니다."
USER_NOT_FOUND = "사용자 정보를 찾을 수 없습니다."

POSTS_FETCH_FAILED = "게시물을 불러오는 중 오류가 발생했습니다."

COMMENTS_POST_ID_REQUIRED = "postId 파라미터가 필요합니다."
COMMENTS_FETCH_FAILED = "댓글을 불러오는 중 오류가 발생했습니다."

LIKES_POST_ID_REQUIRED = "postId가 필요합니다."
ALREADY_LIKED = "이미 좋아요를 누른 게시물입니다."
LIKE_ADD_FAILED = "좋아요 추가 중 오류가 발생했습니다."
LIKE_REMOVE_FAILED = "좋아요 제거 중 오류가 발생했습니다."
LIKE_TOGGLE_FAILED = "좋아요 처리 중 오류가 발생했습니다."
