#!/usr/bin/env python
"""
Production startup script for the SkillFolio Django application.
This script prepares the environment and starts the ASGI server so both
the pages and the community chat sockets are served.
"""

import os
import sys
import subprocess
from pathlib import Path

def setup_environment():
    """Set up production environment variables."""
    os.environ['DEBUG'] = 'False'
    os.environ['DJANGO_SETTINGS_MODULE'] = 'skillfolio.settings'

    if not os.environ.get('SECRET_KEY'):
        from django.core.management.utils import get_random_secret_key
        os.environ['SECRET_KEY'] = get_random_secret_key()
        print("Generated new SECRET_KEY for production")

def check_dependencies():
    """Check if all required packages are installed."""
    required_packages = [
        'django', 'channels', 'gunicorn', 'uvicorn', 'whitenoise',
        'crispy_forms', 'crispy_bootstrap5'
    ]

    missing_packages = []
    for package in required_packages:
        try:
            __import__(package)
        except ImportError:
            missing_packages.append(package)

    if missing_packages:
        print(f"Missing packages: {', '.join(missing_packages)}")
        print("Please install the project first: pip install -e .")
        return False

    print("All required packages are installed")
    return True

def manage(*args, label):
    """Run a manage.py command, reporting whether it succeeded."""
    try:
        subprocess.run([sys.executable, 'manage.py', *args],
                       check=True, capture_output=True)
        print(f"{label} completed successfully")
        return True
    except subprocess.CalledProcessError as e:
        print(f"{label} failed: {e}")
        return False

def start_production_server():
    """Start Gunicorn with uvicorn workers serving the ASGI application."""
    port = os.environ.get('PORT', '8000')
    workers = os.environ.get('WEB_CONCURRENCY', '1')

    print(f"Starting production server on port {port}")
    print("Use Ctrl+C to stop the server")

    try:
        # The in-memory channel layer is per process, so chat fan-out
        # only reaches sockets held by the same worker.
        subprocess.run([
            'gunicorn', 'skillfolio.asgi:application',
            '-k', 'uvicorn.workers.UvicornWorker',
            '--bind', f'0.0.0.0:{port}',
            '--workers', workers,
            '--timeout', '120',
            '--access-logfile', '-',
            '--error-logfile', '-'
        ])
    except KeyboardInterrupt:
        print("\nServer stopped by user")
    except Exception as e:
        print(f"Server error: {e}")

def main():
    print("🚀 Setting up SkillFolio production environment...")

    os.chdir(Path(__file__).parent)
    setup_environment()

    if not check_dependencies():
        sys.exit(1)

    if not manage('migrate', '--noinput', label="Database migrations"):
        print("Warning: Migrations failed, but continuing...")

    if not manage('collectstatic', '--noinput', label="Static collection"):
        print("Warning: Static collection failed, but continuing...")

    if os.environ.get('SEED_SAMPLE_DATA'):
        manage('seed_skillfolio', label="Sample data seeding")

    print("✅ Production environment setup complete!")
    start_production_server()

if __name__ == '__main__':
    main()
