"""
Testes da API de cadastros (/usuario/, /tecnico/, /admin/).

Testa:
- CRUD restrito a ADMIN (403 genérico para as demais regras)
- Exclusão lógica x permanente (422 com chamados vinculados) e reativação
- Troca da própria senha e expediente de técnicos
"""

import pytest

pytestmark = pytest.mark.django_db

NOVO_USUARIO = {
    "nome": "Carla",
    "sobrenome": "Dias",
    "email": "carla@empresa.com",
    "password": "senhaforte1",
    "setor": "recursos humanos",
    "ramal": "2040",
}


class TestCadastroUsuario:

    def test_criar(self, api, admin_headers):
        response = api("post", "/usuario/", NOVO_USUARIO, admin_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["regra"] == "USUARIO"
        assert data["setor"] == "RECURSOS_HUMANOS"
        assert data["ativo"] is True
        assert "password" not in data

    def test_regra_do_corpo_ignorada(self, api, admin_headers):
        response = api("post", "/usuario/", {**NOVO_USUARIO, "regra": "ADMIN"}, admin_headers)

        assert response.json()["data"]["regra"] == "USUARIO"

    def test_email_duplicado(self, api, admin_headers, usuario):
        response = api(
            "post", "/usuario/", {**NOVO_USUARIO, "email": "USUARIO@empresa.com"}, admin_headers
        )

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "error": "Email já cadastrado",
            "meta": {"field": "email"},
        }

    def test_senha_curta(self, api, admin_headers):
        response = api("post", "/usuario/", {**NOVO_USUARIO, "password": "curta"}, admin_headers)

        assert response.status_code == 400
        assert response.json()["meta"]["field"] == "password"

    def test_usuario_sem_setor(self, api, admin_headers):
        dados = {k: v for k, v in NOVO_USUARIO.items() if k != "setor"}

        response = api("post", "/usuario/", dados, admin_headers)

        assert response.status_code == 400
        assert response.json()["meta"]["field"] == "setor"

    @pytest.mark.parametrize("headers_fixture", ["usuario_headers", "tecnico_headers"])
    def test_somente_admin(self, api, request, headers_fixture):
        headers = request.getfixturevalue(headers_fixture)

        response = api("post", "/usuario/", NOVO_USUARIO, headers)

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Acesso negado."}

    def test_listar_com_busca_e_paginacao(self, api, admin_headers, criar_usuario):
        for indice in range(3):
            criar_usuario(email=f"pessoa{indice}@empresa.com", nome=f"Pessoa{indice}")
        criar_usuario(email="outra@empresa.com", nome="Outra")

        response = api("get", "/usuario/?busca=pessoa&limit=2", headers=admin_headers)

        body = response.json()
        assert response.status_code == 200
        assert len(body["data"]) == 2
        assert body["pagination"]["total"] == 3
        assert body["pagination"]["hasNext"] is True

    def test_listar_somente_a_regra_da_rota(self, api, admin_headers, usuario, tecnico):
        response = api("get", "/usuario/", headers=admin_headers)

        assert [u["id"] for u in response.json()["data"]] == [usuario.id]

    def test_paginacao_invalida(self, api, admin_headers):
        response = api("get", "/usuario/?page=0", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["meta"]["field"] == "page"

    def test_detalhe(self, api, admin_headers, usuario):
        response = api("get", f"/usuario/{usuario.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "usuario@empresa.com"

    def test_detalhe_de_outra_regra(self, api, admin_headers, tecnico):
        response = api("get", f"/usuario/{tecnico.id}", headers=admin_headers)

        assert response.status_code == 404

    def test_atualizar(self, api, admin_headers, usuario):
        response = api(
            "put", f"/usuario/{usuario.id}",
            {"ramal": "3030", "avatarUrl": "https://cdn.local/a.png"},
            admin_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["ramal"] == "3030"
        assert data["avatarUrl"] == "https://cdn.local/a.png"
        assert data["nome"] == "Bruna"

    def test_exclusao_logica(self, api, admin_headers, usuario):
        response = api("delete", f"/usuario/{usuario.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {
            "message": "Usuario desativado com sucesso",
            "id": usuario.id,
        }

        listagem = api("get", "/usuario/?incluirInativos=true", headers=admin_headers)
        assert listagem.json()["data"][0]["ativo"] is False
        assert api("get", "/usuario/", headers=admin_headers).json()["data"] == []

    def test_exclusao_permanente(self, api, admin_headers, usuario):
        response = api("delete", f"/usuario/{usuario.id}?permanente=true", headers=admin_headers)

        assert response.json()["data"]["message"] == "Usuario removido permanentemente"
        assert api("get", f"/usuario/{usuario.id}", headers=admin_headers).status_code == 404

    def test_exclusao_permanente_com_chamados(
        self, api, admin_headers, usuario, usuario_headers, servicos
    ):
        api(
            "post", "/chamado/abertura-chamado",
            {"descricao": "Impressora sem toner", "servico": "Impressoras"},
            usuario_headers,
        )

        response = api("delete", f"/usuario/{usuario.id}?permanente=true", headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["meta"] == {"rule": "usuario_com_chamados"}
        assert api("get", f"/usuario/{usuario.id}", headers=admin_headers).status_code == 200

    def test_reativar(self, api, admin_headers, usuario):
        api("delete", f"/usuario/{usuario.id}", headers=admin_headers)

        response = api("patch", f"/usuario/{usuario.id}/reativar", headers=admin_headers)

        assert response.status_code == 200
        assert api("get", "/usuario/", headers=admin_headers).json()["data"][0]["id"] == usuario.id

    def test_buscar_por_email(self, api, admin_headers, tecnico):
        response = api("post", "/usuario/email", {"email": "TECNICO@empresa.com"}, admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == tecnico.id
        assert data["expediente"]["saida"] == "17:00"

    def test_buscar_por_email_inexistente(self, api, admin_headers):
        response = api("post", "/usuario/email", {"email": "ninguem@empresa.com"}, admin_headers)

        assert response.status_code == 404

    def test_buscar_por_email_sem_email(self, api, admin_headers):
        response = api("post", "/usuario/email", {}, admin_headers)

        assert response.status_code == 400
        assert response.json()["meta"] == {"field": "email"}

    def test_buscar_por_email_somente_admin(self, api, usuario_headers):
        response = api("post", "/usuario/email", {"email": "usuario@empresa.com"}, usuario_headers)

        assert response.status_code == 403


class TestAlterarSenha:

    def test_alterar_propria_senha(self, api, usuario, usuario_headers):
        response = api(
            "patch", "/usuario/senha",
            {"senhaAtual": "senhaforte1", "novaSenha": "novasenha123"},
            usuario_headers,
        )

        assert response.status_code == 200
        login = api("post", "/auth/login", {"email": usuario.email, "password": "novasenha123"})
        assert login.status_code == 200

    def test_senha_atual_errada(self, api, usuario_headers):
        response = api(
            "patch", "/usuario/senha",
            {"senhaAtual": "errada123", "novaSenha": "novasenha123"},
            usuario_headers,
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Senha atual incorreta."


class TestCadastroTecnico:

    def test_criar_tecnico_com_expediente(self, api, admin_headers):
        response = api(
            "post", "/tecnico/",
            {
                "nome": "Paulo",
                "sobrenome": "Melo",
                "email": "paulo@empresa.com",
                "password": "senhaforte1",
                "entrada": "13:00",
                "saida": "22:00",
            },
            admin_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 201
        assert data["regra"] == "TECNICO"
        assert data["expediente"]["entrada"] == "13:00"

    def test_mensagem_de_exclusao(self, api, admin_headers, tecnico):
        response = api("delete", f"/tecnico/{tecnico.id}", headers=admin_headers)

        assert response.json()["data"]["message"] == "Tecnico desativado com sucesso"

    def test_tecnico_define_proprio_horario(self, api, tecnico, tecnico_headers):
        response = api(
            "put", f"/tecnico/{tecnico.id}/horarios",
            {"entrada": "09:00", "saida": "18:00"},
            tecnico_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["saida"] == "18:00"

        perfil = api("get", "/auth/me", headers=tecnico_headers).json()["data"]
        assert perfil["expediente"]["entrada"] == "09:00"

    def test_tecnico_nao_altera_horario_de_outro(
        self, api, criar_usuario, auth_headers, tecnico
    ):
        outro = criar_usuario("TECNICO", email="outro.tecnico@empresa.com")

        response = api(
            "put", f"/tecnico/{tecnico.id}/horarios",
            {"entrada": "09:00", "saida": "18:00"},
            auth_headers(outro),
        )

        assert response.status_code == 403

    def test_horario_invalido(self, api, admin_headers, tecnico):
        response = api(
            "put", f"/tecnico/{tecnico.id}/horarios",
            {"entrada": "18:00", "saida": "08:00"},
            admin_headers,
        )

        assert response.status_code == 400

    def test_usuario_nao_define_horario(self, api, tecnico, usuario_headers):
        response = api(
            "put", f"/tecnico/{tecnico.id}/horarios",
            {"entrada": "09:00", "saida": "18:00"},
            usuario_headers,
        )

        assert response.status_code == 403

    def test_restaurar_tecnico(self, api, admin_headers, tecnico):
        api("delete", f"/tecnico/{tecnico.id}", headers=admin_headers)

        response = api("patch", f"/tecnico/{tecnico.id}/restaurar", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["ativo"] is True
        assert data["expediente"]["entrada"] == "08:00"
        assert api("get", "/tecnico/", headers=admin_headers).json()["pagination"]["total"] == 1

    def test_restaurar_tecnico_ativo(self, api, admin_headers, tecnico):
        response = api("patch", f"/tecnico/{tecnico.id}/restaurar", headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["meta"] == {"rule": "usuario_ja_ativo"}

    def test_restaurar_usuario_pela_rota_de_tecnico(self, api, admin_headers, usuario):
        api("delete", f"/usuario/{usuario.id}", headers=admin_headers)

        response = api("patch", f"/tecnico/{usuario.id}/restaurar", headers=admin_headers)

        assert response.status_code == 404

    def test_somente_admin_restaura(self, api, tecnico, tecnico_headers):
        response = api("patch", f"/tecnico/{tecnico.id}/restaurar", headers=tecnico_headers)

        assert response.status_code == 403


class TestCadastroAdmin:

    def test_criar_admin(self, api, admin_headers):
        response = api(
            "post", "/admin/",
            {"nome": "Rita", "sobrenome": "Lopes", "email": "rita@empresa.com", "password": "senhaforte1"},
            admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["regra"] == "ADMIN"

    def test_admin_nao_exclui_a_si_mesmo(self, api, admin, admin_headers):
        response = api("delete", f"/admin/{admin.id}", headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["meta"]["rule"] == "autoexclusao_proibida"

    def test_detalhe_de_admin_nao_existe(self, api, admin, admin_headers):
        response = api("get", f"/admin/{admin.id}", headers=admin_headers)

        assert response.status_code == 405

    def test_reativar_admin(self, api, criar_usuario, admin_headers):
        outro = criar_usuario("ADMIN", email="rita@empresa.com")
        api("delete", f"/admin/{outro.id}", headers=admin_headers)

        response = api("patch", f"/admin/{outro.id}/reativar", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["ativo"] is True

        login = api("post", "/auth/login", {"email": "rita@empresa.com", "password": "senhaforte1"})
        assert login.status_code == 200
