from setuptools import setup, find_packages

setup(
    name="jumpfrog",
    version="1.0.0",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "PyYAML>=6.0",
        "fastapi>=0.100",
        "pydantic>=2.0",
        "uvicorn>=0.23",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "jumpfrog=jumpfrog.__main__:main",
        ],
    },
    author="JumpFrog Team",
    description="Rules engine, bot and multiplayer server for the JumpFrog hop game",
)
