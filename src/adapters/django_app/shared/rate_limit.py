"""
Rate/Abuse Guard.

Contadores de janela fixa no cache do Django (Redis em produção),
por IP do cliente:

- geral: toda requisição da API (RateLimitMiddleware)
- escrita: POST/PUT/PATCH/DELETE; só respostas de sucesso contam
- login: tentativas que falharam (decorator limitar_login)

Limites e janelas vêm de settings.RATE_LIMITS e podem ser
reduzidos nos testes. Orçamento esgotado vira
LimiteRequisicoesExcedidoError, respondido com 429 e Retry-After.

O IP é o REMOTE_ADDR. X-Forwarded-For só é lido quando a conexão
vem de um proxy listado em RATE_LIMIT_PROXIES_CONFIAVEIS.
"""

from functools import wraps
import ipaddress
import json
import logging
import math
import time

from django.conf import settings
from django.core.cache import cache
from django.http import HttpRequest

from src.core.shared.exceptions import LimiteRequisicoesExcedidoError

from .http import erro_response

logger = logging.getLogger(__name__)

METODOS_ESCRITA = ("POST", "PUT", "PATCH", "DELETE")

PADROES = {
    "geral": {
        "janela": 15 * 60,
        "limite": 100,
        "mensagem": "Muitas requisições deste IP, tente novamente em 15 minutos",
    },
    "login": {
        "janela": 15 * 60,
        "limite": 5,
        "mensagem": "Muitas tentativas de login. Tente novamente em 15 minutos.",
    },
    "escrita": {
        "janela": 60,
        "limite": 20,
        "mensagem": "Muitas operações de escrita. Aguarde um momento.",
    },
}


def _redes_confiaveis():
    redes = []
    for item in getattr(settings, "RATE_LIMIT_PROXIES_CONFIAVEIS", ()):
        try:
            redes.append(ipaddress.ip_network(item.strip(), strict=False))
        except ValueError:
            logger.error(f"Proxy confiável inválido em RATE_LIMIT_PROXIES_CONFIAVEIS: {item!r}")
    return redes


def _confiavel(ip: str, redes) -> bool:
    try:
        endereco = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return any(endereco in rede for rede in redes)


def ip_do_cliente(request: HttpRequest) -> str:
    """
    IP usado como chave dos limites.

    Sem proxies confiáveis configurados, é sempre o REMOTE_ADDR.
    Com proxies, percorre X-Forwarded-For da direita para a esquerda
    e devolve o primeiro salto que não é um proxy confiável.
    """
    remoto = request.META.get("REMOTE_ADDR") or "desconhecido"
    redes = _redes_confiaveis()
    if not redes or not _confiavel(remoto, redes):
        return remoto

    saltos = [
        salto.strip()
        for salto in request.META.get("HTTP_X_FORWARDED_FOR", "").split(",")
        if salto.strip()
    ]
    for salto in reversed(saltos):
        if not _confiavel(salto, redes):
            return salto
    return saltos[0] if saltos else remoto


class ContadorJanelaFixa:
    """
    Contador com janela fixa.

    A chave nasce com TTL igual à janela; uma chave irmã `:reset`
    guarda o instante em que a janela termina (para o Retry-After).
    """

    def __init__(self, nome: str):
        config = {**PADROES[nome], **getattr(settings, "RATE_LIMITS", {}).get(nome, {})}
        self.nome = nome
        self.janela = int(config["janela"])
        self.limite = int(config["limite"])
        self.mensagem = config["mensagem"]

    def chave(self, identificador: str) -> str:
        return f"ratelimit:{self.nome}:{identificador}"

    def atual(self, identificador: str) -> int:
        return cache.get(self.chave(identificador), 0)

    def excedido(self, identificador: str) -> bool:
        return self.atual(identificador) >= self.limite

    def registrar(self, identificador: str) -> int:
        """Incrementa e devolve o total na janela corrente."""
        chave = self.chave(identificador)
        if cache.add(chave, 0, timeout=self.janela):
            cache.set(f"{chave}:reset", time.time() + self.janela, timeout=self.janela)
        try:
            return cache.incr(chave)
        except ValueError:
            # janela expirou entre add e incr
            cache.set(chave, 1, timeout=self.janela)
            cache.set(f"{chave}:reset", time.time() + self.janela, timeout=self.janela)
            return 1

    def retry_after(self, identificador: str) -> int:
        reset = cache.get(f"{self.chave(identificador)}:reset")
        if reset is None:
            return self.janela
        return max(int(math.ceil(reset - time.time())), 1)


    def bloquear(self, identificador: str) -> None:
        """
        Raises:
            LimiteRequisicoesExcedidoError: Sempre, com o Retry-After da janela
        """
        raise LimiteRequisicoesExcedidoError(
            self.mensagem,
            retry_after=self.retry_after(identificador),
        )


class RateLimitMiddleware:
    """
    Aplica os limites geral e de escrita a todas as rotas da API.

    Rotas em RATE_LIMIT_ISENTOS (health check, documentação) não contam.
    O limite de escrita não vale para /auth/, que tem o limite de login.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        if self._isento(request.path):
            return self.get_response(request)

        ip = ip_do_cliente(request)

        try:
            geral = ContadorJanelaFixa("geral")
            if geral.registrar(ip) > geral.limite:
                logger.warning(f"[SECURITY] Rate limit geral excedido: {ip}")
                geral.bloquear(ip)

            escrita = None
            if request.method in METODOS_ESCRITA and not request.path.startswith("/auth/"):
                escrita = ContadorJanelaFixa("escrita")
                if escrita.excedido(ip):
                    logger.warning(f"[SECURITY] Rate limit de escrita excedido: {ip}")
                    escrita.bloquear(ip)
        except LimiteRequisicoesExcedidoError as e:
            return erro_response(e)

        response = self.get_response(request)

        if escrita is not None and response.status_code < 400:
            escrita.registrar(ip)

        return response

    @staticmethod
    def _isento(path: str) -> bool:
        isentos = getattr(settings, "RATE_LIMIT_ISENTOS", ("/health/", "/api-docs/"))
        return any(path.startswith(prefixo) for prefixo in isentos)


def _email_da_tentativa(request: HttpRequest) -> str:
    try:
        corpo = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        return ""
    if not isinstance(corpo, dict):
        return ""
    return str(corpo.get("email", "")).strip().lower()


def limitar_login(metodo):
    """
    Limite de tentativas de login por IP.

    Trocar o email a cada tentativa não renova o orçamento. Somente
    respostas de erro (status >= 400) consomem; login bem-sucedido
    não conta. O email aparece apenas nos logs de auditoria.
    """

    @wraps(metodo)
    def wrapper(view, request: HttpRequest, *args, **kwargs):
        ip = ip_do_cliente(request)
        email = _email_da_tentativa(request)
        contador = ContadorJanelaFixa("login")

        try:
            if contador.excedido(ip):
                logger.warning(f"[SECURITY] Rate limit excedido para login: {ip} - {email}")
                contador.bloquear(ip)
        except LimiteRequisicoesExcedidoError as e:
            return view.handle_exception(e)

        response = metodo(view, request, *args, **kwargs)

        if response.status_code >= 400:
            tentativas = contador.registrar(ip)
            logger.warning(
                f"[SECURITY] Falha de login: {ip} - {email} "
                f"({tentativas}/{contador.limite})"
            )

        return response

    return wrapper
