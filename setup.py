#!/usr/bin/env python

from setuptools import setup

def readme():
    with open('README.md') as f:
        return f.read()

setup(name='renewal_counting',
      version='0.1.0',
      description='Event-time and event-count distributions of renewal '
                  'processes',
      long_description=readme(),
      long_description_content_type='text/markdown',
      author='Bruno Beltran',
      author_email='brunobeltran0@gmail.com',
      packages=['renewal_counting'],
      license='MIT',
      classifiers=[
          'Development Status :: 2 - Pre-Alpha',
          'Intended Audience :: Developers',
          'Intended Audience :: Science/Research',
          'License :: OSI Approved :: MIT License',
          'Topic :: Scientific/Engineering :: Mathematics'
      ],
      keywords='renewal process counting statistics convolution scientific',
      install_requires=['numpy', 'scipy', 'pandas'],
      extras_require={'test': ['pytest']},
)
