from typing import Optional
from sqlalchemy import select, or_

from vidtube.models.user import User
from vidtube.repositories.base_repository import BaseRepository

class UserRepository(BaseRepository):
    """
    사용자 관련 데이터 액세스 담당 Repository 클래스
    - User 조회, 생성, 리프레시 토큰 갱신
    """

    async def find_by_id(self, user_id: str) -> Optional[User]:
        """
        주어진 ID와 일치하는 User 객체 반환
        """
        return await self.get(User, user_id)

    async def find_by_username_or_email(
            self,
            username: Optional[str],
            email: Optional[str],
    ) -> Optional[User]:
        """
        username 또는 email 중 하나라도 일치하는 User 반환
        - 값이 없는 조건은 제외
        """
        conditions = []
        if username:
            conditions.append(User.username == username)
        if email:
            conditions.append(User.email == email)
        if not conditions:
            return None
        query = select(User).where(or_(*conditions))
        result = await self.execute(query, "user lookup")
        return result.scalars().first()

    async def create_user(self, user: User) -> User:
        """
        새 User 엔티티를 세션에 추가하고 ID 확정
        """
        self.add(user)
        await self.session.flush()
        return user

    async def save_refresh_token(self, user: User, token: Optional[str]) -> None:
        """
        사용자당 하나의 리프레시 토큰만 유지 (None이면 무효화)
        """
        user.refresh_token = token
        await self.commit()
