from framepace.runtime.bootstrap import main

raise SystemExit(main())
