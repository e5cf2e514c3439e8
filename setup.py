"""
Установочный скрипт для пула скрапинга.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Чтение README
this_directory = Path(__file__).parent
readme_file = this_directory / "README.md"
long_description = readme_file.read_text(encoding='utf-8') if readme_file.exists() else ""

# Чтение requirements
requirements = []
requirements_file = this_directory / "requirements.txt"
if requirements_file.exists():
    with open(requirements_file, 'r', encoding='utf-8') as f:
        requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]

setup(
    name="concurrent-scrape-pool",
    version="1.0.0",
    author="Scrape Pool Team",
    author_email="team@scrapepool.example.com",
    description="Пул конкурентных воркеров для скрапинга URL: fan-out/fan-in каналы, барьер завершения и сводка прогона",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/example/concurrent-scrape-pool",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Internet :: WWW/HTTP",
    ],
    python_requires=">=3.8",
    install_requires=requirements or [
        "psutil>=5.9.0",
        "pyyaml>=6.0",
        "requests>=2.28.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "scrape-pool=scrape_pool.cli:main",
        ],
    },
    keywords="concurrent worker pool threads channel fan-out fan-in scraper graceful shutdown",
    project_urls={
        "Bug Reports": "https://github.com/example/concurrent-scrape-pool/issues",
        "Source": "https://github.com/example/concurrent-scrape-pool",
    },
)
