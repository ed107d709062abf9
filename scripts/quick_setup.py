#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Executa migrations (SQLite sem variáveis de banco)
3. Cria dados de exemplo (opcional): curso com fila aberta,
   fila restrita, sessão e equipe

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'officehours.config.settings')

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_sample_data():
    """
    Cria um curso de exemplo usando os repositórios do container.

    Returns:
        Dicionário com os ids criados (para uso nos requests de teste)
    """
    from officehours.config.container import get_container
    from officehours.core.shared.identifiers import new_id
    from officehours.core.tickets.entities import QueueEntity, SessionEntity
    from officehours.core.users.entities import Role, UserEntity

    container = get_container()
    course_id = new_id()

    session = container.session_repository().add(SessionEntity(course_id=course_id))
    open_queue = container.queue_repository().add(
        QueueEntity(course_id=course_id, name='Hours - Sala 227')
    )
    restricted_queue = container.queue_repository().add(
        QueueEntity(course_id=course_id, name='Hours - Restrita', restricted_session_ids=[session.id])
    )

    print("👥 Criando equipe de exemplo...")

    staff = {}
    for email, role in (('hta@example.edu', Role.HTA), ('ta@example.edu', Role.TA)):
        user = container.user_directory().add(
            UserEntity(email=email, username=email.split('@')[0], is_online=True)
        )
        container.authorization().grant(user.id, role, course_id)
        staff[role.value] = user.id
        print(f"   ✓ {email} ({role.value})")

    print("✅ Dados de exemplo criados!")

    return {
        'course_id': course_id,
        'open_queue_id': open_queue.id,
        'restricted_queue_id': restricted_queue.id,
        'session_id': session.id,
        'session_secret': session.secret,
        'staff': staff,
    }


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import connection

    print("🔍 Verificando conexão com o banco...")

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        print("✅ Conexão OK!")
        return True
    except Exception as e:
        print(f"❌ Erro de conexão: {e}")
        return False


def show_info(sample=None):
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print(f"  Debug Mode: {settings.DEBUG}")

    if sample:
        print(f"  Curso: {sample['course_id']}")
        print(f"  Fila aberta: {sample['open_queue_id']}")
        print(f"  Fila restrita: {sample['restricted_queue_id']}")
        print(f"  Sessão: {sample['session_id']} (segredo: {sample['session_secret']})")
        print(f"  TA: {sample['staff']['ta']}")

    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. django-admin runserver --settings=officehours.config.settings")
    print("   2. POST http://localhost:8000/tickets/api/")
    print(f"   3. Header {settings.OFFICEHOURS_ACTOR_HEADER} para agir como TA")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar dados de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Office Hours - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Sem DATABASE_URL/DATABASE_HOST o SQLite local é usado.")
        return

    run_migrations()

    sample = create_sample_data() if args.with_sample_data else None

    show_info(sample)


if __name__ == '__main__':
    main()
