#!/usr/bin/env python

import os
from setuptools import setup

# load __version__
version_file = 'blendpath/version.py'
# use eval to convert string
__version__ = eval(open(version_file).read().split('=')[-1])

# load README.md as long_description
long_description = ''
if os.path.exists('README.md'):
    with open('README.md', 'r') as f:
        long_description = f.read()

# call the magical setuptools setup
setup(name='blendpath',
      version=__version__,
      description='Generate continuous surface blending paths from 2D boundaries',
      long_description=long_description,
      long_description_content_type='text/markdown',
      license='MIT',
      keywords='toolpath offset contour blending geometry',
      classifiers=[
          'Development Status :: 3 - Alpha',
          'License :: OSI Approved :: MIT License',
          'Programming Language :: Python',
          'Programming Language :: Python :: 3',
          'Natural Language :: English',
          'Topic :: Scientific/Engineering'],
      packages=['blendpath'],
      python_requires='>=3.8',
      install_requires=['numpy',
                        'scipy',
                        'shapely>=2.0',
                        'networkx',
                        'trimesh'],
      extras_require={'test': ['pytest']})
