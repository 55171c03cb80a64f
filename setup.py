from setuptools import setup, find_packages

setup(
    name="lettr",
    version="0.1.0",
    packages=find_packages(include=["lettr", "lettr.*"]),
    package_data={
        "lettr": ["config.yaml"],
        "lettr.analytics": ["signatures.yaml"],
    },
    install_requires=[
        "pydantic>=2",
        "tinydb",
        "openai>=1",
        "pyyaml",
        "python-dotenv",
        "python-dateutil",
        "rich",
        "crawlerdetect",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.9",
)
