import logging

import numpy as np
import blendpath

if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)

    # an L shaped surface with a square hole
    boundaries = [np.array([[0, 0], [0.3, 0], [0.3, 0.12],
                            [0.12, 0.12], [0.12, 0.3], [0, 0.3]]),
                  np.array([[0.03, 0.03], [0.07, 0.03],
                            [0.07, 0.07], [0.03, 0.07]])]

    # generate the process path
    path = blendpath.contour_parallel(boundaries,
                                      tool_radius=0.0125,
                                      overlap=0.005,
                                      safe_traverse_height=0.05,
                                      interpolation_step=0.005)

    for ids, segment in zip(path.loop_ids, path.segments()):
        print('loop {}: {} points'.format(ids, len(segment)))
    print('{} points total'.format(len(path)))
