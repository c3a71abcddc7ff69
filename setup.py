from setuptools import setup, find_packages

setup(
    name="gmail-fluent-api",
    version="1.0.0",
    description="Fluent, synchronous client for the Gmail API",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        'google-api-python-client>=2.0.0',
        'google-auth>=2.0.0',
        'google-auth-httplib2>=0.1.0',
        'pydantic[email]>=2.0.0',
        'pydantic-settings>=2.0.0',
        'python-dotenv>=1.0.0',
        'dateparser>=1.1.0',
        'pytz>=2023.3',
        'typer>=0.9.0',
        'rich>=13.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
            'pytest-mock>=3.10.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'gfa=gfa.cli:main',
        ],
    },
)
