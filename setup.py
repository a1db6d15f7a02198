"""Setup configuration for the Event Chat Relay."""

from setuptools import setup, find_packages

setup(
    name="event-chat-relay",
    version="0.1.0",
    description="Realtime chat relay and comment store for group events",
    author="Event Chat Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "websockets>=13.0",
        "fastapi>=0.110.0",
        "pydantic>=2.5.0",
        "sqlalchemy>=2.0.0",
        "httpx>=0.27.0",
        "uvicorn>=0.27.0",
        "textual>=0.50.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
            "pytest-asyncio>=0.23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "event-chat-relay=relay.main:main",
            "event-chat-api=api.main:main",
            "event-chat-client=client.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
