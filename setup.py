from setuptools import setup, find_packages

def parse_requirements(requirements):
    with open(requirements) as f:
        return [l.strip('\n') for l in f if l.strip('\n') and not l.startswith('#')]

requirements = parse_requirements("requirements.txt")

setup(
    name='pelangi_backend',
    version='0.0.1',
    install_requires=requirements,
    package_dir={"": "src"},
    packages=find_packages("src"),
    extras_require={
        "test": [
            "pytest>=7.4",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "pelangi=pelangi_backend.cli.cli:cli",
        ],
    }
)
