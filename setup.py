from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="stepwright",
    version="1.0.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Run Gherkin feature files against Playwright pages with reusable step definitions",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/stepwright",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*", "docs"]),
    py_modules=["run"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Testing",
        "Topic :: Software Development :: Testing :: BDD",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "playwright>=1.40.0",
        "pyyaml>=6.0.1",
        "click>=8.1.7",
        "pytest>=7.4.3",
        "colorama>=0.4.6",
        "python-dotenv>=1.0.0",
        "cucumber-expressions>=17.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.3",
            "pytest-cov>=4.1.0",
        ],
        "dev": [
            "pytest-cov>=4.1.0",
            "black>=23.10.0",
            "flake8>=6.1.0",
            "pre-commit>=3.5.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "stepwright=run:main",
        ],
    },
    project_urls={
        "Bug Reports": "https://github.com/yourusername/stepwright/issues",
        "Source": "https://github.com/yourusername/stepwright",
    },
    keywords="automation testing playwright bdd gherkin cucumber step-definitions",
    license="MIT",
)
