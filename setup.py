from setuptools import setup, find_packages

setup(
    name="dirmail",
    version="0.1.0",
    description="Email one file from each recipient-named subdirectory through Mail, SMTP or SendGrid",
    author="",
    author_email="",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "Jinja2>=3.0.0",
        "sendgrid>=6.9.0",
        "python-dotenv>=0.19.0",
        "click>=8.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "PyYAML>=5.4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "dirmail=dirmail.cli:main",
        ],
    },
)
