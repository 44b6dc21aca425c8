from setuptools import setup, find_packages

setup(
    name="conversational-orm-intro",
    version="0.1.0",
    packages=find_packages(where="src"),  # packages live under src/
    package_dir={"": "src"},              # src is the package root
    python_requires=">=3.10",
    install_requires=[
        "sqlalchemy[asyncio]>=2.0",
        "aiosqlite>=0.19",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "python-dotenv>=1.0",
        "rich>=13.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.23",
        ],
    },
)
