"""
Testes para a API JSON de Tickets e do diretório de usuários.

Testa:
- Envelope {success, data/error, meta}
- Mapeamento de erros de domínio para status HTTP
- Identidade do ator via header do gateway
- Integração com Container DI (repositórios Django reais)
"""

import json
from unittest.mock import patch

import pytest
from django.urls import reverse

from officehours.adapters.django_app.tickets.api_views import TicketAPIClaimView
from officehours.adapters.django_app.tickets.models import DomainEventModel
from officehours.core.shared.identifiers import new_id
from officehours.core.users.entities import Role


pytestmark = pytest.mark.django_db


# =============================================================================
# Helpers
# =============================================================================

def post_json(client, url, payload=None, actor_id=None):
    headers = {'HTTP_X_USER_ID': actor_id} if actor_id else {}
    return client.post(
        url,
        data=json.dumps(payload or {}),
        content_type='application/json',
        **headers,
    )


def ticket_url(name, ticket_id):
    return reverse(f'tickets:{name}', kwargs={'pk': ticket_id})


@pytest.fixture
def create_ticket(client, queue):
    """Cria ticket pela API e retorna o `data` da resposta."""

    def create(**payload):
        body = {'queue_id': queue.id, 'student_emails': ['ana@brown.edu'], 'notifications': {}}
        body.update(payload)
        response = post_json(client, reverse('tickets:api_create'), body)
        assert response.status_code == 201, response.json()
        return response.json()['data']

    return create


# =============================================================================
# Criação
# =============================================================================

class TestTicketAPICreateView:

    def test_post_cria_ticket(self, client, queue):
        """POST deve criar ticket e retornar 201."""
        response = post_json(client, reverse('tickets:api_create'), {
            'queue_id': queue.id,
            'student_emails': ['Ana@Brown.edu', 'bia@brown.edu'],
            'question': 'Erro de segmentação',
            'notifications': {'email': True, 'phone': '4015551234', 'carrier': 'att'},
        })

        assert response.status_code == 201
        body = response.json()
        assert body['success'] is True
        data = body['data']
        assert data['status'] == 'open'
        assert data['queue_id'] == queue.id
        assert len(data['student_ids']) == 2
        assert data['notifications']['phone'] == '4015551234'
        assert 'claimed_at' not in data

    def test_post_grava_evento(self, create_ticket):
        data = create_ticket()

        events = DomainEventModel.objects.filter(aggregate_id=data['id'])
        assert [e.event_type for e in events] == ['TicketCreatedEvent']
        assert events[0].sequence == 1

    def test_emails_como_string(self, create_ticket):
        data = create_ticket(student_emails='ana@brown.edu, bia@brown.edu')

        assert len(data['student_ids']) == 2

    def test_email_invalido(self, client, queue):
        response = post_json(client, reverse('tickets:api_create'), {
            'queue_id': queue.id,
            'student_emails': ['not-an-email'],
            'notifications': {},
        })

        assert response.status_code == 400
        body = response.json()
        assert body['success'] is False
        assert body['meta']['kind'] == 'ValidationError'
        assert body['meta']['field'] == 'student_emails'

    def test_email_sem_dominio_completo(self, client, queue):
        """Formulário usa o mesmo validador do provisionamento de usuários."""
        with patch('officehours.core.tickets.use_cases.CreateTicketService.execute') as execute:
            response = post_json(client, reverse('tickets:api_create'), {
                'queue_id': queue.id,
                'student_emails': ['ana@localhost'],
                'notifications': {},
            })

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'student_emails'
        execute.assert_not_called()

    def test_emails_repetidos(self, client, queue):
        response = post_json(client, reverse('tickets:api_create'), {
            'queue_id': queue.id,
            'student_emails': ['ana@brown.edu', 'ANA@brown.edu'],
            'notifications': {},
        })

        assert response.status_code == 400
        body = response.json()
        assert body['meta']['field'] == 'student_emails'
        assert body['error'] == 'Email repetido: ana@brown.edu'

    def test_segredo_fora_do_formato(self, client, queue_factory, session_factory):
        session = session_factory()
        queue = queue_factory(restricted_session_ids=[session.id])

        response = post_json(client, reverse('tickets:api_create'), {
            'queue_id': queue.id,
            'student_emails': ['ana@brown.edu'],
            'notifications': {},
            'session_id': session.id,
            'secret': 'segredo qualquer',
        })

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'secret'

    def test_sem_notifications(self, client, queue):
        response = post_json(client, reverse('tickets:api_create'), {
            'queue_id': queue.id,
            'student_emails': ['ana@brown.edu'],
        })

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'notifications'

    def test_notifications_vazias_usam_padrao(self, create_ticket):
        data = create_ticket(notifications={})

        assert data['notifications'] == {'email': False, 'web': True, 'phone': None, 'carrier': None}

    def test_sem_emails(self, client, queue):
        response = post_json(client, reverse('tickets:api_create'), {'queue_id': queue.id})

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'student_emails'

    def test_notifications_invalidas(self, client, queue):
        response = post_json(client, reverse('tickets:api_create'), {
            'queue_id': queue.id,
            'student_emails': ['ana@brown.edu'],
            'notifications': {'pigeon': True},
        })

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'notifications'

    def test_segredo_sem_sessao(self, client, queue):
        response = post_json(client, reverse('tickets:api_create'), {
            'queue_id': queue.id,
            'student_emails': ['ana@brown.edu'],
            'notifications': {},
            'secret': new_id(),
        })

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'session_id'

    def test_json_invalido(self, client):
        response = client.post(
            reverse('tickets:api_create'),
            data='{not json',
            content_type='application/json',
        )

        assert response.status_code == 400
        assert response.json()['success'] is False

    def test_fila_inexistente(self, client, db):
        response = post_json(client, reverse('tickets:api_create'), {
            'queue_id': new_id(),
            'student_emails': ['ana@brown.edu'],
            'notifications': {},
        })

        assert response.status_code == 404
        assert response.json()['meta']['code'] == 'queues.doesNotExist'

    def test_fila_restrita_segredo_errado(self, client, queue_factory, session_factory):
        session = session_factory()
        queue = queue_factory(restricted_session_ids=[session.id])

        response = post_json(client, reverse('tickets:api_create'), {
            'queue_id': queue.id,
            'student_emails': ['ana@brown.edu'],
            'notifications': {},
            'session_id': session.id,
            'secret': new_id(),
        })

        assert response.status_code == 403
        body = response.json()
        assert body['error'] == 'Cannot signup with invalid secret'
        assert body['meta']['code'] == 'tickets.createTicket.invalidSecret'

    def test_fila_restrita_sessao_estranha(self, client, queue_factory, session_factory):
        allowed = session_factory()
        foreign = session_factory()
        queue = queue_factory(restricted_session_ids=[allowed.id])

        response = post_json(client, reverse('tickets:api_create'), {
            'queue_id': queue.id,
            'student_emails': ['ana@brown.edu'],
            'notifications': {},
            'session_id': foreign.id,
            'secret': foreign.secret,
        })

        assert response.status_code == 403
        assert response.json()['meta']['kind'] == 'InvalidSession'

    def test_get_nao_permitido(self, client, db):
        response = client.get(reverse('tickets:api_create'))

        assert response.status_code == 405


# =============================================================================
# Transições
# =============================================================================

class TestTicketAPIActionViews:

    def test_claim_por_ta(self, client, create_ticket, ta):
        ticket = create_ticket()

        response = post_json(client, ticket_url('api_claim', ticket['id']), actor_id=ta.id)

        assert response.status_code == 200
        data = response.json()['data']
        assert data['status'] == 'claimed'
        assert data['claimed_by'] == ta.id

    def test_claim_sem_ator(self, client, create_ticket):
        ticket = create_ticket()

        response = post_json(client, ticket_url('api_claim', ticket['id']))

        assert response.status_code == 403
        body = response.json()
        assert body['error'] == 'Only TAs and above can claim tickets.'
        assert body['meta']['code'] == 'tickets.claimTicket.unauthorized'

    def test_ator_invalido(self, client, create_ticket):
        ticket = create_ticket()

        response = post_json(client, ticket_url('api_claim', ticket['id']), actor_id='robert')

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'actor_id'

    def test_ticket_id_invalido(self, client, ta):
        response = post_json(client, ticket_url('api_claim', 'abc'), actor_id=ta.id)

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'ticket_id'

    def test_ticket_inexistente(self, client, ta):
        response = post_json(client, ticket_url('api_claim', new_id()), actor_id=ta.id)

        assert response.status_code == 404
        assert response.json()['meta']['code'] == 'tickets.doesNotExist'

    def test_release_remove_carimbo(self, client, create_ticket, ta):
        ticket = create_ticket()
        post_json(client, ticket_url('api_claim', ticket['id']), actor_id=ta.id)

        response = post_json(client, ticket_url('api_release', ticket['id']), actor_id=ta.id)

        data = response.json()['data']
        assert data['status'] == 'open'
        assert 'claimed_at' not in data
        assert 'claimed_by' not in data

    @pytest.mark.parametrize('name,status', [
        ('api_mark_as_missing', 'markedAsMissing'),
        ('api_mark_as_done', 'markedAsDone'),
    ])
    def test_marcacoes(self, client, create_ticket, ta, name, status):
        ticket = create_ticket()

        response = post_json(client, ticket_url(name, ticket['id']), actor_id=ta.id)

        assert response.status_code == 200
        assert response.json()['data']['status'] == status

    def test_eventos_em_sequencia(self, client, create_ticket, ta):
        ticket = create_ticket()
        post_json(client, ticket_url('api_claim', ticket['id']), actor_id=ta.id)
        post_json(client, ticket_url('api_mark_as_done', ticket['id']), actor_id=ta.id)

        events = DomainEventModel.objects.filter(aggregate_id=ticket['id']).order_by('sequence')
        assert [(e.sequence, e.event_type) for e in events] == [
            (1, 'TicketCreatedEvent'),
            (2, 'TicketClaimedEvent'),
            (3, 'TicketMarkedAsDoneEvent'),
        ]
        assert events[1].user_id == ta.id

    def test_erro_inesperado(self, client, create_ticket, ta):
        ticket = create_ticket()

        with patch.object(TicketAPIClaimView, 'get_service', side_effect=RuntimeError('boom')):
            response = post_json(client, ticket_url('api_claim', ticket['id']), actor_id=ta.id)

        assert response.status_code == 500
        assert response.json() == {'success': False, 'error': 'Erro interno do servidor'}


class TestTicketAPIDelete:

    def test_dono_remove_via_delete(self, client, create_ticket, ta):
        ticket = create_ticket()
        owner = ticket['student_ids'][0]

        response = client.delete(ticket_url('api_detail', ticket['id']), HTTP_X_USER_ID=owner)

        assert response.status_code == 200
        assert response.json()['data']['deleted_by'] == owner

        # Removido: demais transições tratam como inexistente
        response = post_json(client, ticket_url('api_claim', ticket['id']), actor_id=ta.id)
        assert response.status_code == 404

    def test_remove_via_post(self, client, create_ticket, ta):
        ticket = create_ticket()

        response = post_json(client, ticket_url('api_delete', ticket['id']), actor_id=ta.id)

        assert response.status_code == 200
        assert response.json()['data']['status'] == 'deleted'

    def test_estranho_nao_remove(self, client, create_ticket, user_factory):
        ticket = create_ticket()
        stranger = user_factory('stranger@brown.edu')

        response = post_json(client, ticket_url('api_delete', ticket['id']), actor_id=stranger.id)

        assert response.status_code == 403
        assert response.json()['meta']['code'] == 'tickets.deleteTicket.unauthorized'

    def test_remover_de_novo_ignora(self, client, create_ticket, ta):
        ticket = create_ticket()
        first = post_json(client, ticket_url('api_delete', ticket['id']), actor_id=ta.id).json()

        second = post_json(client, ticket_url('api_delete', ticket['id']), actor_id=ta.id)

        assert second.status_code == 200
        assert second.json()['data']['deleted_at'] == first['data']['deleted_at']

    def test_remover_de_novo_rejeita(self, client, create_ticket, ta, settings):
        settings.TICKETS_REDELETE_POLICY = 'reject'
        ticket = create_ticket()
        post_json(client, ticket_url('api_delete', ticket['id']), actor_id=ta.id)

        response = post_json(client, ticket_url('api_delete', ticket['id']), actor_id=ta.id)

        assert response.status_code == 409
        assert response.json()['meta']['code'] == 'tickets.deleteTicket.alreadyDeleted'


# =============================================================================
# Diretório de usuários
# =============================================================================

class TestUserAPIViews:

    @pytest.fixture
    def student(self, user_factory):
        return user_factory('ana@brown.edu', secondary_emails=['ana@gmail.com'], first_name='Ana')

    def test_self(self, client, student):
        response = client.get(reverse('directory:api_self'), HTTP_X_USER_ID=student.id)

        body = response.json()
        assert response.status_code == 200
        assert body['meta'] == {'total': 1}
        assert body['data'][0]['email'] == 'ana@brown.edu'
        assert 'status' in body['data'][0]

    def test_self_anonimo(self, client, db):
        response = client.get(reverse('directory:api_self'))

        assert response.json()['data'] == []

    def test_by_ids_equipe(self, client, student, ta, course_id):
        response = client.get(
            reverse('directory:api_by_ids'),
            {'user_ids': student.id, 'course_id': course_id},
            HTTP_X_USER_ID=ta.id,
        )

        assert response.json()['data'][0]['email'] == 'ana@brown.edu'

    def test_by_ids_estudante(self, client, student, ta, course_id):
        response = client.get(
            reverse('directory:api_by_ids'),
            {'user_ids': f'{student.id},{ta.id}', 'course_id': course_id},
            HTTP_X_USER_ID=student.id,
        )

        data = response.json()['data']
        assert len(data) == 2
        assert all('email' not in user for user in data)

    def test_by_ids_id_invalido(self, client, course_id, db):
        response = client.get(
            reverse('directory:api_by_ids'),
            {'user_ids': 'abc', 'course_id': course_id},
        )

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'user_ids'

    def test_by_emails(self, client, student):
        response = client.get(reverse('directory:api_by_emails'), {'emails': 'ana@gmail.com'})

        data = response.json()['data']
        assert [user['id'] for user in data] == [student.id]
        assert 'email' not in data[0]

    def test_staff(self, client, student, ta, user_factory, course_id):
        hta = user_factory('hta@brown.edu', roles=[(Role.HTA, course_id)])

        response = client.get(reverse('directory:api_course_staff', kwargs={'course_id': course_id}))

        data = response.json()['data']
        assert {user['id'] for user in data} == {ta.id, hta.id}
        assert all('email' in user for user in data)

    def test_online_staff(self, client, ta, user_factory, course_id):
        user_factory('hta@brown.edu', roles=[(Role.HTA, course_id)], is_online=False)

        response = client.get(
            reverse('directory:api_course_online_staff', kwargs={'course_id': course_id})
        )

        data = response.json()['data']
        assert [user['id'] for user in data] == [ta.id]
        assert data[0]['status']['online'] is True

    def test_course_id_invalido(self, client, db):
        response = client.get(reverse('directory:api_course_staff', kwargs={'course_id': 'cs17'}))

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'course_id'

    def test_post_nao_permitido(self, client, db):
        response = client.post(reverse('directory:api_self'))

        assert response.status_code == 405


def test_health(client):
    response = client.get('/health/')

    assert response.status_code == 200
    assert response.json() == {'status': 'ok'}
