from setuptools import setup, find_packages

setup(
    name="hexpanel",
    version="0.3.0",
    description="hexpanel - taskbar and launcher backend for a Wayland desktop shell",
    license="GPLv3",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "PyQt6>=6.7.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "hexpanel=hexpanel.main:main",
        ],
    },
    package_data={
        "hexpanel": [
            "assets/*.svg",
        ],
    },
)
