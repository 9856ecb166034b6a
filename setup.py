from setuptools import find_packages, setup

setup(
    name="order-finance",
    version="0.1.0",
    python_requires=">=3.10",
    packages=find_packages(include=["order_finance", "order_finance.*"]),
    install_requires=[
        "sqlalchemy>=2.0",
        "pandas",
        "click",
        "python-dotenv"
    ],
    extras_require={"dev": ["pytest"]},
    entry_points={
        "console_scripts": [
            "order-finance=order_finance.cli.main:cli"
        ]
    },
)
