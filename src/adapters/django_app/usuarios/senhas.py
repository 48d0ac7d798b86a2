"""PasswordHasher sobre django.contrib.auth.hashers (PASSWORD_HASHERS do settings)."""

from django.contrib.auth.hashers import check_password, make_password


class DjangoPasswordHasher:

    def gerar_hash(self, senha: str) -> str:
        return make_password(senha)

    def verificar(self, senha: str, password_hash: str) -> bool:
        if not password_hash:
            return False
        return check_password(senha, password_hash)
